"""WordPress.org registry package.

- client.py: catalog lookups for core, plugins and themes, and the
  deterministic archive download URLs.

Public API is preserved at registry.wporg without shims.
"""

# Patch points exposed for tests (e.g., monkeypatch in tests)
from common.http_client import get_json  # noqa: F401

# Public API re-exports
from .client import (  # noqa: F401
    WordPressOrgClient,
    archive_url,
    core_archive_url,
)

__all__ = [
    "WordPressOrgClient",
    "archive_url",
    "core_archive_url",
    # Patch points for tests
    "get_json",
]
