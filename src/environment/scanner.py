"""Installed environment scanner.

Recovers the core version and each plugin/theme version from the files of an
existing WordPress tree and returns an ``EnvironmentManifest``. The scan is
read-only, never touches the network and descends one directory level per
component. A component whose header cannot be found is reported with the
"unknown" version instead of failing the scan.
"""

from __future__ import annotations

import logging
import os
import re
from typing import List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from errors import NotAnEnvironmentRoot
from versioning.models import EnvironmentManifest, ObservedComponent

logger = logging.getLogger(__name__)

WP_VERSION_REGEX = re.compile(r"\$wp_version\s*=\s*'([^']+)'\s*;")
COMPONENT_VERSION_REGEX = re.compile(r"^[ \t/*#@]*Version:[ \t]*(.*)$", re.IGNORECASE | re.MULTILINE)


def read_file_head(path: str, size: int = Constants.HEADER_READ_SIZE) -> str:
    """Return at most ``size`` leading bytes of ``path`` decoded as UTF-8."""
    with open(path, "rb") as fh:
        data = fh.read(size)
    return data.decode("utf-8", errors="ignore")


def match_version_header(text: str) -> Optional[str]:
    """Return the value of the first non-empty ``Version:`` header line, if any."""
    for match in COMPONENT_VERSION_REGEX.finditer(text):
        value = match.group(1).strip()
        if value:
            return value
    return None


def _list_directories(location: str) -> List[str]:
    """Immediate subdirectory names of ``location``; empty when it does not exist."""
    try:
        with os.scandir(location) as entries:
            return sorted(e.name for e in entries if e.is_dir())
    except FileNotFoundError:
        if is_debug_enabled(logger):
            logger.debug("No container at %s", location)
        return []


def _list_files_of_type(location: str, extension: str) -> List[str]:
    with os.scandir(location) as entries:
        return sorted(
            e.name for e in entries
            if e.is_file() and os.path.splitext(e.name)[1] == extension
        )


def read_core_version(root: str) -> str:
    """Read ``$wp_version`` from wp-includes/version.php.

    Raises:
        NotAnEnvironmentRoot: If the version file does not exist.
        OSError: For any other I/O failure.
    """
    version_php = os.path.join(root, Constants.CORE_VERSION_FILE)
    try:
        head = read_file_head(version_php)
    except FileNotFoundError as exc:
        raise NotAnEnvironmentRoot(root) from exc

    match = WP_VERSION_REGEX.search(head)
    if not match:
        logger.warning(
            "Can't find wordpress version in %s",
            version_php,
            extra=extra_context(event="scan", component="scanner", outcome="unknown_version"),
        )
        return Constants.UNKNOWN_VERSION
    return match.group(1)


def read_plugin_version(plugins_dir: str, slug: str) -> str:
    """First ``Version:`` header among the plugin's top-level PHP files."""
    plugin_dir = os.path.join(plugins_dir, slug)
    for name in _list_files_of_type(plugin_dir, Constants.PLUGIN_HEADER_EXT):
        version = match_version_header(read_file_head(os.path.join(plugin_dir, name)))
        if version:
            return version
    return Constants.UNKNOWN_VERSION


def read_theme_version(themes_dir: str, slug: str) -> str:
    """``Version:`` header of the theme's style.css."""
    stylesheet = os.path.join(themes_dir, slug, Constants.THEME_STYLESHEET)
    try:
        head = read_file_head(stylesheet)
    except FileNotFoundError:
        logger.warning("Theme %s has no %s", slug, Constants.THEME_STYLESHEET)
        return Constants.UNKNOWN_VERSION
    return match_version_header(head) or Constants.UNKNOWN_VERSION


def scan_environment(root: str) -> EnvironmentManifest:
    """Build the observed manifest of the environment rooted at ``root``."""
    core_version = read_core_version(root)

    content_dir = os.path.join(root, Constants.CONTENT_DIR)
    plugins_dir = os.path.join(content_dir, Constants.PLUGINS_DIR)
    themes_dir = os.path.join(content_dir, Constants.THEMES_DIR)

    plugins = tuple(
        ObservedComponent(slug=slug, version=read_plugin_version(plugins_dir, slug))
        for slug in _list_directories(plugins_dir)
    )
    themes = tuple(
        ObservedComponent(slug=slug, version=read_theme_version(themes_dir, slug))
        for slug in _list_directories(themes_dir)
    )

    unknown = [c.slug for c in plugins + themes if c.version == Constants.UNKNOWN_VERSION]
    if unknown:
        logger.warning(
            "Version header not found for: %s",
            ", ".join(unknown),
            extra=extra_context(event="scan", component="scanner", outcome="unknown_version"),
        )
    logger.info(
        "Scanned %s: wordpress %s, %d plugins, %d themes",
        root, core_version, len(plugins), len(themes),
        extra=extra_context(event="scan", component="scanner", outcome="success"),
    )
    return EnvironmentManifest(core_version=core_version, plugins=plugins, themes=themes)
