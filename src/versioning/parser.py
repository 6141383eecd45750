"""Boundary parsing of raw version strings and CLI component tokens.

Raw strings are turned into ``VersionExpression`` values here so that the
resolution core never re-parses them.
"""

import re
from typing import Iterable, Optional, Tuple

import semantic_version

from constants import Constants
from errors import InvalidConstraint
from .models import (
    LATEST,
    ComponentRequest,
    ConstraintKind,
    EnvironmentRequest,
    VersionExpression,
)

_OPEN_TOKENS = ("", Constants.LATEST, Constants.UNKNOWN_VERSION)


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def normalize_range(spec_str: str) -> str:
    """Normalize npm range syntax (hyphen, x-ranges) into SimpleSpec-compatible form."""
    s = spec_str.strip()

    # Hyphen ranges: "1.2.3 - 1.4.5" => ">=1.2.3,<=1.4.5"
    m = re.match(r'^\s*([0-9A-Za-z\.\-\+]+)\s+-\s+([0-9A-Za-z\.\-\+]+)\s*$', s)
    if m:
        left, right = m.group(1), m.group(2)
        return f">={left},<={right}"

    # x-ranges: 1.2.x or 1.x or 1.* -> convert to comparator pairs
    s2 = s.replace('*', 'x').lower()
    m = re.match(r'^\s*(\d+)\.(\d+)\.x\s*$', s2)
    if m:
        major, minor = int(m.group(1)), int(m.group(2))
        return f">={major}.{minor}.0,<{major}.{minor + 1}.0"

    m = re.match(r'^\s*(\d+)(\.x)?\s*$', s2)
    if m:
        major = int(m.group(1))
        return f">={major}.0.0,<{major + 1}.0.0"

    return s


def parse_range_spec(spec_str: str) -> semantic_version.base.BaseSpec:
    """Parse an npm-style range, falling back to a normalized SimpleSpec.

    Raises:
        InvalidConstraint: If neither grammar accepts the string.
    """
    try:
        return semantic_version.NpmSpec(spec_str)
    except ValueError:
        try:
            return semantic_version.SimpleSpec(normalize_range(spec_str))
        except ValueError as e:
            raise InvalidConstraint(spec_str, f"invalid semver range: {e}") from e


def parse_version_expression(raw: Optional[str]) -> VersionExpression:
    """Classify a raw version field as exact, range or latest.

    ``None``, empty, "latest" and "unknown" all mean any version. A strict
    semantic version is exact; anything the range grammar accepts is a range.

    Raises:
        InvalidConstraint: For strings that are neither.
    """
    if raw is None:
        return LATEST
    if not isinstance(raw, str):
        # numbers from programmatic callers
        raw = str(raw)
    text = raw.strip()
    if text.lower() in _OPEN_TOKENS:
        return LATEST
    if semantic_version.validate(text):
        return VersionExpression(kind=ConstraintKind.EXACT, raw=text)
    parse_range_spec(text)
    return VersionExpression(kind=ConstraintKind.RANGE, raw=text)


def parse_component(identifier: str, raw_spec: Optional[str] = None) -> ComponentRequest:
    """Construct a ComponentRequest from a slug and an optional raw constraint."""
    slug = (identifier or "").strip()
    if not slug:
        raise InvalidConstraint(identifier, "component name cannot be an empty string")
    return ComponentRequest(slug=slug, constraint=parse_version_expression(raw_spec))


def parse_component_token(token: str) -> ComponentRequest:
    """Parse a CLI token of the form ``slug`` or ``slug:constraint``."""
    identifier, spec = tokenize_rightmost_colon(token)
    return parse_component(identifier, spec)


def build_environment_request(
    core: Optional[str],
    plugins: Iterable[str] = (),
    themes: Iterable[str] = (),
) -> EnvironmentRequest:
    """Build an EnvironmentRequest from CLI style inputs."""
    return EnvironmentRequest(
        core_constraint=parse_version_expression(core),
        plugins=tuple(parse_component_token(t) for t in plugins or ()),
        themes=tuple(parse_component_token(t) for t in themes or ()),
    )
