"""Manifest resolution: turn an EnvironmentRequest into a ResolvedEnvironment."""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from common.logging_utils import extra_context, Timer
from registry.wporg import WordPressOrgClient
from .models import (
    ComponentKind,
    ComponentRequest,
    EnvironmentRequest,
    ResolvedComponent,
    ResolvedEnvironment,
)
from .resolver import resolve_version


class ManifestResolver:
    """Resolve every constraint of a request against the registry.

    Resolution is sequential (core, plugins in order, themes in order) and
    fails fast: the first error propagates and nothing partial is returned.
    """

    def __init__(
        self,
        registry: Optional[WordPressOrgClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry or WordPressOrgClient()
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, request: EnvironmentRequest) -> ResolvedEnvironment:
        with Timer() as t:
            core_versions = self.registry.fetch_core_catalog()
            core_version = resolve_version(request.core_constraint, core_versions, name="wordpress")
            self.logger.info(
                "Resolved wordpress %s",
                core_version,
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    kind="core",
                    requested=request.core_constraint.raw,
                    resolved=core_version,
                )
            )
            plugins = self._resolve_components(ComponentKind.PLUGIN, request.plugins)
            themes = self._resolve_components(ComponentKind.THEME, request.themes)

        resolved = ResolvedEnvironment(
            core_version=core_version,
            core_source_url=self.registry.core_archive_url(core_version),
            plugins=plugins,
            themes=themes,
        )
        self.logger.debug(
            "Resolved manifest",
            extra=extra_context(
                event="function_exit",
                component="resolver",
                action="resolve",
                plugins=len(plugins),
                themes=len(themes),
                duration_ms=t.duration_ms(),
            )
        )
        return resolved

    def _resolve_components(
        self, kind: ComponentKind, requests: Sequence[ComponentRequest]
    ) -> Tuple[ResolvedComponent, ...]:
        resolved = []
        for req in requests:
            # ComponentNotFound propagates as-is; absence is terminal
            entry = self.registry.fetch_component_catalog(kind, req.slug)
            version = resolve_version(req.constraint, entry.versions, name=entry.slug)
            component = ResolvedComponent(
                slug=entry.slug,
                version=version,
                source_url=self.registry.archive_url(kind, entry.slug, version),
            )
            self.logger.info(
                "Resolved %s %s %s",
                kind.value,
                component.slug,
                version,
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    kind=kind.value,
                    slug=component.slug,
                    requested=req.constraint.raw,
                    resolved=version,
                )
            )
            resolved.append(component)
        return tuple(resolved)
