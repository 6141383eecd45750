"""Argument parsing functionality for wpscaffold."""

import argparse
import os

from constants import Constants


def _add_common_options(parser):
    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Enable debug logging",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: WPSCAFFOLD_LOG_LEVEL, then INFO)",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS)
    parser.add_argument("--pretty",
                        dest="PRETTY",
                        help="Human readable log output instead of JSON lines",
                        action="store_true")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--api-url",
                        dest="API_URL",
                        help=f"Registry API base URL (default: {Constants.API_URL_WPORG})",
                        action="store",
                        type=str)
    parser.add_argument("--downloads-url",
                        dest="DOWNLOADS_URL",
                        help=f"Archive download base URL (default: {Constants.DOWNLOADS_URL_WPORG})",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="HTTP timeout in seconds",
                        action="store",
                        type=float)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="wpscaffold",
        description="Scaffold a WordPress environment from a manifest, or extract a manifest from one",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", metavar="<command>")
    subparsers.required = True

    scaffold = subparsers.add_parser(
        "scaffold",
        help="Scaffold a fresh wordpress filesystem",
    )
    _add_common_options(scaffold)
    source = scaffold.add_mutually_exclusive_group()
    source.add_argument("-f", "--file",
                        dest="MANIFEST_FILE",
                        help="Manifest file (YAML or JSON)",
                        action="store",
                        type=str)
    source.add_argument("--wp",
                        dest="CORE_VERSION",
                        help="WordPress version or range (default: latest)",
                        action="store",
                        type=str)
    scaffold.add_argument("--plugins",
                          dest="PLUGINS",
                          help="Plugins as slug or slug:range",
                          nargs="+",
                          default=[])
    scaffold.add_argument("--themes",
                          dest="THEMES",
                          help="Themes as slug or slug:range",
                          nargs="+",
                          default=[])
    scaffold.add_argument("-d", "--dest",
                          dest="DEST",
                          help="Destination directory",
                          action="store",
                          type=str,
                          required=True)
    scaffold.add_argument("--workdir",
                          dest="WORKDIR",
                          help="Parent directory for the temporary working directory",
                          action="store",
                          type=str)
    scaffold.add_argument("-o", "--output",
                          dest="OUTPUT",
                          help="Also write the resolved (pinned) manifest to this path",
                          action="store",
                          type=str)
    scaffold.add_argument("--format",
                          dest="OUTPUT_FORMAT",
                          help="Format of --output (inferred from its extension by default)",
                          action="store",
                          type=str.lower,
                          choices=Constants.MANIFEST_FORMATS)

    manifest = subparsers.add_parser(
        "manifest",
        help="Create a manifest from a wordpress filesystem",
    )
    _add_common_options(manifest)
    manifest.add_argument("-p", "--path",
                          dest="PATH",
                          help="WordPress root to scan (default: current directory)",
                          action="store",
                          type=str,
                          default=os.getcwd())
    manifest.add_argument("--output-format",
                          dest="OUTPUT_FORMAT",
                          help="Output format",
                          action="store",
                          type=str.lower,
                          choices=Constants.MANIFEST_FORMATS,
                          default=Constants.DEFAULT_MANIFEST_FORMAT)
    manifest.add_argument("-o", "--output",
                          dest="OUTPUT",
                          help="Write the manifest to this path instead of stdout",
                          action="store",
                          type=str)

    return parser.parse_args(argv)
