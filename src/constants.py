"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESOLUTION_ERROR = 3
    ENVIRONMENT_ERROR = 4
    USAGE_ERROR = 64


class ManifestFormats(Enum):
    """Serialization formats supported for manifests.

    Args:
        Enum (string): Manifest formats supported by the program.
    """

    YAML = "yaml"
    JSON = "json"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    API_URL_WPORG = "https://api.wordpress.org"
    DOWNLOADS_URL_WPORG = "https://downloads.wordpress.org"
    CORE_NAME = "wordpress"
    CORE_CATALOG_PATH = "/core/version-check/1.7/"
    PLUGIN_INFO_PATH = "/plugins/info/1.0/{slug}.json"
    THEME_INFO_PATH = "/themes/info/1.1/"

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    USER_AGENT = "wpscaffold/0.3"

    # Installed environment layout
    CONTENT_DIR = "wp-content"
    PLUGINS_DIR = "plugins"
    THEMES_DIR = "themes"
    UPLOADS_DIR = "uploads"
    CORE_VERSION_FILE = "wp-includes/version.php"
    PLUGIN_HEADER_EXT = ".php"
    THEME_STYLESHEET = "style.css"
    HEADER_READ_SIZE = 8192

    UNKNOWN_VERSION = "unknown"
    LATEST = "latest"
    LATEST_RANGE = ">=0.0.0"
    OBSERVED_VERSION_TYPE = "observed"

    WORKDIR_PREFIX = "wpscaffold-"
    WORKDIR_PARENT = None  # system temp dir unless configured

    MANIFEST_FORMATS = [ManifestFormats.YAML.value, ManifestFormats.JSON.value]
    DEFAULT_MANIFEST_FORMAT = ManifestFormats.YAML.value
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    ENV_LOG_LEVEL = "WPSCAFFOLD_LOG_LEVEL"
    ENV_LOG_FORMAT = "WPSCAFFOLD_LOG_FORMAT"
    ENV_CONFIG = "WPSCAFFOLD_CONFIG"
    DEFAULT_CONFIG_LOCATIONS = [
        "wpscaffold.yml",
        "wpscaffold.yaml",
        "~/.config/wpscaffold/config.yml",
    ]
