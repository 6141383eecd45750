"""Test doubles shared across test modules."""

from errors import ComponentNotFound
from registry.wporg import archive_url, core_archive_url
from versioning.models import CatalogEntry, ComponentKind

BASE = "https://downloads.example.test"


class FakeRegistry:
    """In-memory stand-in for WordPressOrgClient recording every lookup."""

    def __init__(self, core=None, plugins=None, themes=None, missing=()):
        self.core = core if core is not None else {"6.3.1", "6.4.0", "6.5.0"}
        self.catalogs = {
            ComponentKind.PLUGIN: plugins or {},
            ComponentKind.THEME: themes or {},
        }
        self.missing = set(missing)
        self.calls = []

    def fetch_core_catalog(self):
        self.calls.append(("core", None))
        return frozenset(self.core)

    def fetch_component_catalog(self, kind, slug):
        self.calls.append((kind.value, slug))
        if slug in self.missing:
            raise ComponentNotFound(kind.value, slug)
        return CatalogEntry(slug=slug, versions=frozenset(self.catalogs[kind].get(slug, ())))

    def core_archive_url(self, version):
        return core_archive_url(version, BASE)

    def archive_url(self, kind, slug, version):
        return archive_url(kind, slug, version, BASE)
