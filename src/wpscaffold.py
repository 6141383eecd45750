"""wpscaffold - WordPress environment scaffolding from declarative manifests

Commands:
    scaffold: resolve a manifest against WordPress.org and lay it out on disk
    manifest: extract a manifest from an installed WordPress tree

Returns:
    int: Exit code
"""
import logging
import sys

from args import parse_args
from cli_config import configure
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from errors import WpScaffoldError


def _run_scaffold(args):
    from cli_scaffold import run_scaffold  # pylint: disable=import-outside-toplevel
    return run_scaffold(args)


def _run_manifest(args):
    from cli_manifest import run_manifest  # pylint: disable=import-outside-toplevel
    return run_manifest(args)


COMMANDS = {
    "scaffold": _run_scaffold,
    "manifest": _run_manifest,
}


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(
        level="DEBUG" if getattr(args, "VERBOSE", False) else getattr(args, "LOG_LEVEL", None),
        fmt="pretty" if getattr(args, "PRETTY", False) else None,
    )
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)


def dispatch(args) -> int:
    """Run the handler for ``args.action`` and map errors to exit codes."""
    logger = logging.getLogger(__name__)
    handler = COMMANDS[args.action]
    if is_debug_enabled(logger):
        logger.debug(
            "Received the following options",
            extra=extra_context(event="function_entry", component="cli", action=args.action, options=vars(args))
        )
    try:
        return handler(args)
    except WpScaffoldError as e:
        logger.error(
            "%s",
            e,
            extra=extra_context(event="error", component="cli", action=args.action, error=type(e).__name__)
        )
        return e.exit_code.value
    except OSError as e:
        logger.error("File error: %s", e, extra=extra_context(event="error", component="cli", action=args.action))
        return ExitCodes.FILE_ERROR.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    configure(args)
    sys.exit(dispatch(args))


if __name__ == "__main__":
    main()
