"""CLI handler for ``wpscaffold scaffold``.

Builds the EnvironmentRequest (from a manifest file or inline flags), resolves
it completely, and only then materializes it into the destination.
"""

from __future__ import annotations

import logging

from constants import Constants, ExitCodes
from environment.materializer import EnvironmentMaterializer
from errors import UsageError
from manifest_io import load_manifest, write_manifest
from registry.wporg import WordPressOrgClient
from versioning.models import EnvironmentRequest
from versioning.parser import build_environment_request
from versioning.service import ManifestResolver

logger = logging.getLogger(__name__)


def build_request(args) -> EnvironmentRequest:
    """Return the EnvironmentRequest described by the parsed arguments."""
    manifest_file = getattr(args, "MANIFEST_FILE", None)
    plugins = getattr(args, "PLUGINS", None) or []
    themes = getattr(args, "THEMES", None) or []
    if manifest_file:
        if plugins or themes:
            raise UsageError("--plugins/--themes cannot be combined with --file")
        return load_manifest(manifest_file)
    return build_environment_request(
        getattr(args, "CORE_VERSION", None) or Constants.LATEST,
        plugins,
        themes,
    )


def run_scaffold(args) -> int:
    """Resolve and materialize an environment; returns the exit code."""
    request = build_request(args)
    logger.debug("Scaffold request: %s", request)

    registry = WordPressOrgClient()
    resolved = ManifestResolver(registry).resolve(request)

    if getattr(args, "OUTPUT", None):
        write_manifest(resolved, args.OUTPUT, getattr(args, "OUTPUT_FORMAT", None))

    core_root = EnvironmentMaterializer().materialize(resolved, args.DEST)
    logger.info("WordPress environment ready at %s", core_root)
    return ExitCodes.SUCCESS.value
