"""Manifest text (de)serialization in YAML or JSON.

Manifest shape::

    wordpress:
      version: ">=6.0.0 <6.5.0"
    plugins:
      - slug: akismet
        version: latest
    themes:
      - slug: twentytwentyfour

Version fields are parsed into ``VersionExpression`` values on load.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

import yaml

from constants import Constants, ManifestFormats
from errors import InvalidManifest
from versioning.models import (
    EnvironmentManifest,
    EnvironmentRequest,
    ResolvedEnvironment,
)
from versioning.parser import parse_component, parse_version_expression

logger = logging.getLogger(__name__)

CORE_KEY = Constants.CORE_NAME

_NUMERIC_TAGS = ("tag:yaml.org,2002:int", "tag:yaml.org,2002:float")


class ManifestLoader(yaml.SafeLoader):  # pylint: disable=too-many-ancestors
    """SafeLoader that keeps numeric-looking scalars as strings, so 6.10 stays "6.10"."""


ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _component_list(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise InvalidManifest(f"'{key}' must be a list")
    result = []
    for item in items:
        if isinstance(item, str):
            item = {"slug": item}
        if not isinstance(item, dict) or "slug" not in item:
            raise InvalidManifest(f"Every entry of '{key}' needs a slug: {item!r}")
        result.append(item)
    return result


def manifest_from_dict(data: Any) -> EnvironmentRequest:
    """Build an EnvironmentRequest from decoded manifest data."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidManifest("Manifest must be a mapping")

    core = data.get(CORE_KEY) or {}
    if not isinstance(core, dict):
        core = {"version": core}

    return EnvironmentRequest(
        core_constraint=parse_version_expression(core.get("version")),
        plugins=tuple(
            parse_component(str(p["slug"]), p.get("version"))
            for p in _component_list(data, "plugins")
        ),
        themes=tuple(
            parse_component(str(t["slug"]), t.get("version"))
            for t in _component_list(data, "themes")
        ),
    )


def _detect_format(path: str) -> str:
    if path.lower().endswith(".json"):
        return ManifestFormats.JSON.value
    return ManifestFormats.YAML.value


def load_manifest(path: str) -> EnvironmentRequest:
    """Read and parse a manifest file (JSON by extension, YAML otherwise).

    Raises:
        InvalidManifest: If the text cannot be decoded or is malformed.
        OSError: If the file cannot be read.
    """
    with open(path, "r", encoding="utf-8") as fh:
        text = fh.read()
    try:
        if _detect_format(path) == ManifestFormats.JSON.value:
            data = json.loads(text, parse_float=str, parse_int=str)
        else:
            data = yaml.load(text, Loader=ManifestLoader)
    except (ValueError, yaml.YAMLError) as e:
        raise InvalidManifest(f"Cannot parse manifest {path}: {e}") from e
    logger.debug("Loaded manifest from %s", path)
    return manifest_from_dict(data)


def manifest_to_dict(manifest: Union[EnvironmentManifest, ResolvedEnvironment]) -> Dict[str, Any]:
    """Render an observed or resolved manifest as plain data."""
    if isinstance(manifest, EnvironmentManifest):
        observed = {"versionType": Constants.OBSERVED_VERSION_TYPE}
        return {
            CORE_KEY: {"version": manifest.core_version, **observed},
            "plugins": [{"slug": c.slug, "version": c.version, **observed} for c in manifest.plugins],
            "themes": [{"slug": c.slug, "version": c.version, **observed} for c in manifest.themes],
        }
    return {
        CORE_KEY: {"version": manifest.core_version},
        "plugins": [{"slug": c.slug, "version": c.version} for c in manifest.plugins],
        "themes": [{"slug": c.slug, "version": c.version} for c in manifest.themes],
    }


def dump_manifest(
    manifest: Union[EnvironmentManifest, ResolvedEnvironment],
    fmt: str = Constants.DEFAULT_MANIFEST_FORMAT,
) -> str:
    """Serialize a manifest to YAML or JSON text."""
    data = manifest_to_dict(manifest)
    if fmt == ManifestFormats.JSON.value:
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def write_manifest(
    manifest: Union[EnvironmentManifest, ResolvedEnvironment],
    path: str,
    fmt: Optional[str] = None,
) -> None:
    """Write a manifest to ``path``; the format defaults to the extension."""
    text = dump_manifest(manifest, fmt or _detect_format(path))
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    logger.info("Manifest written to %s", path)
