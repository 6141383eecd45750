"""WordPress.org registry client: core, plugin and theme catalogs.

Each lookup is a single request with no retry and no caching. Transport
failures and non-2xx statuses surface as ``RegistryUnreachable``; an explicit
"not found" answer for a slug surfaces as ``ComponentNotFound``.
"""

from __future__ import annotations

import logging
from typing import Any, FrozenSet, Optional
from urllib.parse import quote

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from errors import ComponentNotFound, RegistryUnreachable
from versioning.models import CatalogEntry, ComponentKind

import registry.wporg as wporg_pkg

logger = logging.getLogger(__name__)


def core_archive_url(version: str, base: Optional[str] = None) -> str:
    """Return the canonical no-content core archive URL for ``version``."""
    base = (base or Constants.DOWNLOADS_URL_WPORG).rstrip("/")
    return f"{base}/release/{Constants.CORE_NAME}-{version}-no-content.zip"


def archive_url(kind: ComponentKind, slug: str, version: str, base: Optional[str] = None) -> str:
    """Return the canonical per-component, per-version archive URL."""
    base = (base or Constants.DOWNLOADS_URL_WPORG).rstrip("/")
    return f"{base}/{kind.value}/{slug}.{version}.zip"


class WordPressOrgClient:
    """Catalog lookups against the WordPress.org API."""

    def __init__(self, api_url: Optional[str] = None, downloads_url: Optional[str] = None):
        self.api_url = (api_url or Constants.API_URL_WPORG).rstrip("/")
        self.downloads_url = (downloads_url or Constants.DOWNLOADS_URL_WPORG).rstrip("/")

    def _get(self, url: str, context: str, params: Optional[dict] = None) -> Any:
        """GET ``url`` and return the decoded body, or raise RegistryUnreachable."""
        try:
            status, data = wporg_pkg.get_json(url, context=context, params=params)
        except requests.RequestException as exc:
            logger.error(
                "Registry request failed",
                extra=extra_context(
                    event="http_error",
                    component="registry",
                    outcome="exception",
                    target=safe_url(url),
                    context=context,
                )
            )
            raise RegistryUnreachable(url, reason=str(exc)) from exc
        except ValueError as exc:
            logger.error(
                "Registry returned an undecodable body",
                extra=extra_context(
                    event="parse",
                    component="registry",
                    outcome="json_decode_error",
                    target=safe_url(url),
                    context=context,
                )
            )
            raise RegistryUnreachable(url, reason="response is not valid JSON") from exc

        if not 200 <= status < 300:
            logger.warning(
                "Registry returned non-2xx status",
                extra=extra_context(
                    event="http_response",
                    component="registry",
                    outcome="non_2xx",
                    status_code=status,
                    target=safe_url(url),
                    context=context,
                )
            )
            raise RegistryUnreachable(url, status=status)
        return data

    def fetch_core_catalog(self) -> FrozenSet[str]:
        """Return the set of core versions offered by the version-check API.

        Raises:
            RegistryUnreachable: On transport errors, non-2xx statuses or bodies
                without an offer list.
        """
        url = self.api_url + Constants.CORE_CATALOG_PATH
        data = self._get(url, context="core")
        offers = data.get("offers") if isinstance(data, dict) else None
        if not isinstance(offers, list):
            raise RegistryUnreachable(url, reason="response carries no offers")

        versions = frozenset(
            str(offer["version"]) for offer in offers
            if isinstance(offer, dict) and offer.get("version")
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Fetched core catalog",
                extra=extra_context(
                    event="catalog",
                    component="registry",
                    action="fetch_core_catalog",
                    count=len(versions),
                )
            )
        return versions

    def _component_request(self, kind: ComponentKind, slug: str):
        if kind == ComponentKind.PLUGIN:
            path = Constants.PLUGIN_INFO_PATH.format(slug=quote(slug, safe=""))
            return self.api_url + path, None
        params = {
            "action": "theme_information",
            "request[slug]": slug,
            "request[fields][versions]": "1",
        }
        return self.api_url + Constants.THEME_INFO_PATH, params

    def fetch_component_catalog(self, kind: ComponentKind, slug: str) -> CatalogEntry:
        """Return the canonical slug and offered versions of a plugin or theme.

        Raises:
            ComponentNotFound: When the registry answers false/null or an error object.
            RegistryUnreachable: On transport errors or non-2xx statuses.
        """
        url, params = self._component_request(kind, slug)
        data = self._get(url, context=kind.value, params=params)

        if data is None or data is False or (isinstance(data, dict) and "error" in data):
            logger.warning(
                "Component not found in registry",
                extra=extra_context(
                    event="catalog",
                    component="registry",
                    outcome="not_found",
                    kind=kind.value,
                    slug=slug,
                )
            )
            raise ComponentNotFound(kind.value, slug)
        if not isinstance(data, dict):
            raise RegistryUnreachable(url, reason="unexpected response shape")

        versions = data.get("versions") or {}
        entry = CatalogEntry(
            slug=str(data.get("slug") or slug),
            versions=frozenset(str(v) for v in versions) if isinstance(versions, (dict, list)) else frozenset(),
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Fetched component catalog",
                extra=extra_context(
                    event="catalog",
                    component="registry",
                    action="fetch_component_catalog",
                    kind=kind.value,
                    slug=entry.slug,
                    count=len(entry.versions),
                )
            )
        return entry

    def core_archive_url(self, version: str) -> str:
        return core_archive_url(version, self.downloads_url)

    def archive_url(self, kind: ComponentKind, slug: str, version: str) -> str:
        return archive_url(kind, slug, version, self.downloads_url)
