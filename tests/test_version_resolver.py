"""Tests for version constraint resolution."""

import pytest
import semantic_version

from errors import InvalidConstraint, NoMatchingVersion
from versioning.models import ConstraintKind, VersionExpression, LATEST
from versioning.parser import parse_version_expression
from versioning.resolver import coerce_candidates, resolve_version


def rng(raw):
    return VersionExpression(kind=ConstraintKind.RANGE, raw=raw)


def exact(raw):
    return VersionExpression(kind=ConstraintKind.EXACT, raw=raw)


class TestRangeResolution:
    """Range expressions pick the highest satisfying offered version."""

    def test_bounded_range_picks_highest_inside(self):
        available = {"6.4.0", "6.5.0", "6.3.1"}
        assert resolve_version(rng(">=6.0.0 <6.5.0"), available) == "6.4.0"

    def test_caret_range(self):
        available = {"1.2.0", "1.9.3", "2.0.0"}
        assert resolve_version(rng("^1.2.0"), available) == "1.9.3"

    def test_partial_version_range(self):
        available = {"6.4", "6.4.1", "6.4.3", "6.5"}
        assert resolve_version(parse_version_expression("6.4"), available) == "6.4.3"

    def test_unsatisfiable_range_raises(self):
        with pytest.raises(NoMatchingVersion) as exc:
            resolve_version(rng(">=7.0.0"), {"6.4.0", "6.5.0"}, name="wordpress")
        assert exc.value.candidate_count == 2
        assert "wordpress" in str(exc.value)

    def test_prereleases_excluded_by_default(self):
        available = {"6.4.0", "6.5.0-rc.1"}
        assert resolve_version(rng(">=6.0.0"), available) == "6.4.0"

    def test_maximality(self):
        available = {"1.0", "1.1.0", "1.1.5", "2.0", "2.3.1", "3.0.0", "trunk"}
        for raw in (">=1.0.0", "<2.0.0", "^2.0.0", "~1.1.0", ">=1.1.0 <3.0.0", "1.x"):
            spec = semantic_version.NpmSpec(raw)
            result = resolve_version(rng(raw), available)
            assert result in available
            chosen = semantic_version.Version.coerce(result)
            assert spec.match(chosen)
            satisfying = [v for v in coerce_candidates(available).values() if spec.match(v)]
            assert all(chosen >= v for v in satisfying)


class TestLatestResolution:
    """Latest behaves as the unbounded range."""

    def test_latest_with_loose_versions(self):
        assert resolve_version(LATEST, {"4.2", "5.0", "5.0.1"}) == "5.0.1"

    def test_returns_registry_string_not_coerced_form(self):
        assert resolve_version(LATEST, {"4.2", "5.0"}) == "5.0"

    def test_uncoercible_versions_ignored(self):
        assert resolve_version(LATEST, {"trunk", "1.0"}) == "1.0"

    def test_only_uncoercible_versions_raise(self):
        with pytest.raises(NoMatchingVersion):
            resolve_version(LATEST, {"trunk", "dev"})

    def test_duplicate_coercions_prefer_canonical(self):
        assert resolve_version(LATEST, {"5.9", "5.9.0"}) == "5.9.0"

    def test_deterministic(self):
        available = ["3.1", "3.1.0", "2.9.9", "3.0.12"]
        results = {resolve_version(LATEST, list(reversed(available))), resolve_version(LATEST, available)}
        assert results == {"3.1.0"}


class TestExactResolution:
    """Exact pins pass through unchanged."""

    def test_exact_offered(self):
        assert resolve_version(exact("6.4.2"), {"6.4.2", "6.5.0"}) == "6.4.2"

    def test_exact_not_offered_still_passes_through(self):
        assert resolve_version(exact("9.9.9"), {"1.0.0"}) == "9.9.9"

    def test_exact_invalid_version_raises(self):
        with pytest.raises(InvalidConstraint):
            resolve_version(exact("six"), {"1.0.0"})


class TestEmptyCatalog:
    """An empty catalog always fails."""

    @pytest.mark.parametrize("expression", [exact("1.0.0"), rng(">=0.0.0"), LATEST])
    def test_empty_available_raises(self, expression):
        with pytest.raises(NoMatchingVersion):
            resolve_version(expression, set())


class TestFourPartVersions:
    """Dotted components past the patch level order releases."""

    def test_latest_prefers_four_part_release(self):
        assert resolve_version(LATEST, {"3.1.1", "3.1.2", "3.1.2.1"}) == "3.1.2.1"

    def test_range_includes_four_part_release(self):
        assert resolve_version(rng("<3.2.0"), {"3.1.2", "3.1.2.1", "3.2.0"}) == "3.1.2.1"

    def test_fourth_component_compared_numerically(self):
        assert resolve_version(LATEST, {"3.1.2.9", "3.1.2.10", "3.1.2"}) == "3.1.2.10"

    def test_patch_level_still_dominates(self):
        assert resolve_version(LATEST, {"3.1.2.9", "3.1.3"}) == "3.1.3"

    def test_insertion_order_does_not_matter(self):
        available = ["3.1.2.1", "3.1.2", "3.1.1"]
        assert resolve_version(LATEST, available) == resolve_version(LATEST, list(reversed(available)))

    def test_trailing_zero_collapses_to_canonical(self):
        candidates = coerce_candidates({"3.1.2", "3.1.2.0"})
        assert list(candidates) == ["3.1.2"]
