"""Error kinds raised by the resolution, materialization and scan engines.

Every error aborts the current run; callers (the CLI) decide how to present
them. Each exception keeps its structured fields as attributes so that they can
be logged with ``extra_context``.
"""

from __future__ import annotations

from typing import Optional

from constants import ExitCodes

__all__ = [
    "WpScaffoldError",
    "InvalidConstraint",
    "InvalidManifest",
    "UsageError",
    "NoMatchingVersion",
    "ComponentNotFound",
    "RegistryUnreachable",
    "DownloadFailed",
    "ExtractFailed",
    "DestinationNotEmpty",
    "NotAnEnvironmentRoot",
]


class WpScaffoldError(Exception):
    """Base class for all errors surfaced by wpscaffold."""

    exit_code = ExitCodes.FILE_ERROR


class InvalidConstraint(WpScaffoldError, ValueError):
    """Raised when a user supplied version or range string is malformed."""

    exit_code = ExitCodes.USAGE_ERROR

    def __init__(self, raw: Optional[str], reason: str = "not a version or range"):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid version constraint '{raw}': {reason}")


class InvalidManifest(WpScaffoldError):
    """Raised when manifest text does not have the expected structure."""

    exit_code = ExitCodes.USAGE_ERROR


class UsageError(WpScaffoldError):
    """Raised when command line options are combined in an unsupported way."""

    exit_code = ExitCodes.USAGE_ERROR


class NoMatchingVersion(WpScaffoldError):
    """Raised when no offered version satisfies a constraint."""

    exit_code = ExitCodes.RESOLUTION_ERROR

    def __init__(self, name: str, constraint: str, candidate_count: int = 0):
        self.name = name
        self.constraint = constraint
        self.candidate_count = candidate_count
        super().__init__(
            f"No version of {name} matches '{constraint}' "
            f"({candidate_count} candidates)"
        )


class ComponentNotFound(WpScaffoldError):
    """Raised when the registry explicitly reports that a slug does not exist."""

    exit_code = ExitCodes.RESOLUTION_ERROR

    def __init__(self, kind: str, slug: str):
        self.kind = kind
        self.slug = slug
        super().__init__(f"{kind.capitalize()} '{slug}' is not found")


class RegistryUnreachable(WpScaffoldError):
    """Raised on transport errors or non-success statuses from the registry."""

    exit_code = ExitCodes.CONNECTION_ERROR

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"status {status}" if status is not None else (reason or "no response")
        super().__init__(f"Registry request to {url} failed: {detail}")


class DownloadFailed(WpScaffoldError):
    """Raised when an archive cannot be downloaded."""

    exit_code = ExitCodes.CONNECTION_ERROR

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"Status: {status}" if status is not None else (reason or "no response")
        super().__init__(f"Failed to download '{url}'. {detail}")


class ExtractFailed(WpScaffoldError):
    """Raised when an archive is corrupt or cannot be written out."""

    exit_code = ExitCodes.ENVIRONMENT_ERROR

    def __init__(self, archive: str, dest: str, reason: str = ""):
        self.archive = archive
        self.dest = dest
        self.reason = reason
        super().__init__(f"Failed to extract '{archive}' into '{dest}': {reason}")


class DestinationNotEmpty(WpScaffoldError):
    """Raised when the destination already holds an environment."""

    exit_code = ExitCodes.ENVIRONMENT_ERROR

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Destination already contains '{path}'")


class NotAnEnvironmentRoot(WpScaffoldError):
    """Raised when a scanned directory has no core version marker."""

    exit_code = ExitCodes.FILE_ERROR

    def __init__(self, root: str):
        self.root = root
        super().__init__(f"{root} is not a wordpress folder")
