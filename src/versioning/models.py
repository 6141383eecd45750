"""Data models for version constraints, environment requests and manifests."""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple

from constants import Constants


class ConstraintKind(Enum):
    """Resolution strategy derived from a version expression."""
    EXACT = "exact"
    RANGE = "range"
    LATEST = "latest"


class ComponentKind(Enum):
    """Extension kinds installed into wp-content."""
    PLUGIN = "plugin"
    THEME = "theme"


@dataclass(frozen=True)
class VersionExpression:
    """Parsed version expression; build it with ``versioning.parser``."""
    kind: ConstraintKind
    raw: str

    def __str__(self) -> str:
        return self.raw


LATEST = VersionExpression(kind=ConstraintKind.LATEST, raw=Constants.LATEST)


@dataclass(frozen=True)
class ComponentRequest:
    """A user's intent for one plugin or theme."""
    slug: str
    constraint: VersionExpression = LATEST


@dataclass(frozen=True)
class EnvironmentRequest:
    """Resolution input: core constraint plus ordered plugin and theme requests."""
    core_constraint: VersionExpression = LATEST
    plugins: Tuple[ComponentRequest, ...] = ()
    themes: Tuple[ComponentRequest, ...] = ()


@dataclass(frozen=True)
class CatalogEntry:
    """Registry answer for one component: canonical slug and offered versions."""
    slug: str
    versions: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ResolvedComponent:
    """A component pinned to one version and one archive location."""
    slug: str
    version: str
    source_url: str


@dataclass(frozen=True)
class ResolvedEnvironment:
    """Fully resolved environment; never built partially."""
    core_version: str
    core_source_url: str
    plugins: Tuple[ResolvedComponent, ...] = ()
    themes: Tuple[ResolvedComponent, ...] = ()


@dataclass(frozen=True)
class ObservedComponent:
    """A component found on disk with the version read from its header."""
    slug: str
    version: str = Constants.UNKNOWN_VERSION


@dataclass(frozen=True)
class EnvironmentManifest:
    """Scanner output mirroring ResolvedEnvironment, with observed versions."""
    core_version: str
    plugins: Tuple[ObservedComponent, ...] = ()
    themes: Tuple[ObservedComponent, ...] = ()
