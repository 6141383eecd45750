"""CLI handler for ``wpscaffold manifest``: scan an installed tree."""

from __future__ import annotations

import logging
import sys

from constants import Constants, ExitCodes
from environment.scanner import scan_environment
from manifest_io import dump_manifest, write_manifest

logger = logging.getLogger(__name__)


def run_manifest(args) -> int:
    """Scan ``args.PATH`` and print or write the observed manifest."""
    manifest = scan_environment(args.PATH)
    fmt = getattr(args, "OUTPUT_FORMAT", None) or Constants.DEFAULT_MANIFEST_FORMAT
    output = getattr(args, "OUTPUT", None)
    if output:
        write_manifest(manifest, output, fmt)
    else:
        sys.stdout.write(dump_manifest(manifest, fmt))
    return ExitCodes.SUCCESS.value
