"""Version constraint resolution using semantic versioning.

``resolve_version`` picks one concrete version from the set a registry offers.
WordPress.org versions are frequently not strict semver ("5.9", "4.2"), so
offered strings are coerced before comparison while the returned value is
always the registry's own string. Plugins often publish four-part versions
("3.1.2.1"); the dotted components past the patch level order releases that
share a major.minor.patch.
"""

import logging
import re
from typing import Dict, Iterable, Optional, Tuple

import semantic_version

from constants import Constants
from errors import InvalidConstraint, NoMatchingVersion
from .models import ConstraintKind, VersionExpression
from .parser import parse_range_spec

logger = logging.getLogger(__name__)


def _version_from_str(v: str) -> Optional[semantic_version.Version]:
    """Parse a version string, coercing loose forms; None when impossible."""
    try:
        return semantic_version.Version(v)
    except ValueError:
        pass
    try:
        return semantic_version.Version.coerce(v)
    except ValueError:
        return None


_DOTTED_PREFIX = re.compile(r"^\s*v?(\d+(?:\.\d+)*)")


def _extra_components(raw: str) -> Tuple[int, ...]:
    """Numeric dotted components after major.minor.patch ("3.1.2.1" -> (1,)).

    Trailing zeros are dropped so that "3.1.2.0" ranks equal to "3.1.2".
    """
    match = _DOTTED_PREFIX.match(raw)
    if not match:
        return ()
    extra = [int(part) for part in match.group(1).split(".")][3:]
    while extra and extra[-1] == 0:
        extra.pop()
    return tuple(extra)


def ordering_key(version: semantic_version.Version, raw: str):
    """Total order over offered versions: semver precedence, then extra components."""
    return version.truncate("prerelease"), _extra_components(raw)


def coerce_candidates(available: Iterable[str]) -> Dict[str, semantic_version.Version]:
    """Map each distinct offered version string to its comparable Version.

    Strings that rank equal ("5.9" and "5.9.0") are collapsed to one entry:
    the one already in canonical form wins, otherwise the lexically smallest.
    """
    chosen: Dict[tuple, Tuple[str, semantic_version.Version]] = {}
    for raw in sorted(set(available)):
        ver = _version_from_str(raw.strip())
        if ver is None:
            continue
        key = ordering_key(ver, raw)
        current = chosen.get(key)
        if current is None or (raw == str(ver) and current[0] != str(current[1])):
            chosen[key] = (raw, ver)
    return dict(chosen.values())


def resolve_version(
    expression: VersionExpression,
    available: Iterable[str],
    name: str = "component",
) -> str:
    """Resolve an expression against the offered versions.

    Args:
        expression: Parsed constraint.
        available: Version strings offered by the registry.
        name: Used in error messages only.

    Returns:
        The concrete version string.

    Raises:
        NoMatchingVersion: If ``available`` is empty or nothing satisfies the range.
        InvalidConstraint: If an exact pin is not a valid semantic version.
    """
    offered = set(available or ())
    if not offered:
        raise NoMatchingVersion(name, expression.raw, 0)

    if expression.kind == ConstraintKind.EXACT:
        if not semantic_version.validate(expression.raw):
            raise InvalidConstraint(expression.raw, "not a semantic version")
        # Pinned coordinates are trusted and passed through unchanged
        return expression.raw

    spec_str = expression.raw
    if expression.kind == ConstraintKind.LATEST:
        spec_str = Constants.LATEST_RANGE
    spec = parse_range_spec(spec_str)

    candidates = coerce_candidates(offered)
    matching = [raw for raw, ver in candidates.items() if spec.match(ver)]
    if not matching:
        raise NoMatchingVersion(name, expression.raw, len(offered))

    resolved = max(matching, key=lambda raw: ordering_key(candidates[raw], raw))
    logger.debug(
        "Resolved %s '%s' to %s among %d candidates",
        name, expression.raw, resolved, len(offered),
    )
    return resolved
