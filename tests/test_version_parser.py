"""Tests for version expression and component token parsing."""

import pytest

from errors import InvalidConstraint
from versioning.models import ComponentRequest, ConstraintKind, LATEST
from versioning.parser import (
    build_environment_request,
    normalize_range,
    parse_component_token,
    parse_version_expression,
    tokenize_rightmost_colon,
)


class TestParseVersionExpression:
    """Classification of raw version fields."""

    @pytest.mark.parametrize("raw", ["6.4.2", "1.0.0-rc.1", " 5.0.1 "])
    def test_exact(self, raw):
        expr = parse_version_expression(raw)
        assert expr.kind == ConstraintKind.EXACT
        assert expr.raw == raw.strip()

    @pytest.mark.parametrize("raw", [">=6.0.0 <6.5.0", "^1.2", "~5.0", "6.4", "6.x", "*", "1.0.0 - 2.0.0"])
    def test_range(self, raw):
        assert parse_version_expression(raw).kind == ConstraintKind.RANGE

    @pytest.mark.parametrize("raw", [None, "", "  ", "latest", "LATEST", "unknown"])
    def test_latest(self, raw):
        assert parse_version_expression(raw) == LATEST

    def test_yaml_float_is_treated_as_text(self):
        expr = parse_version_expression(6.4)
        assert expr.kind == ConstraintKind.RANGE
        assert expr.raw == "6.4"

    def test_garbage_raises(self):
        with pytest.raises(InvalidConstraint) as exc:
            parse_version_expression("not a version!!")
        assert exc.value.raw == "not a version!!"


class TestNormalizeRange:
    """SimpleSpec fallbacks for npm shorthands."""

    def test_hyphen(self):
        assert normalize_range("1.2.3 - 1.4.5") == ">=1.2.3,<=1.4.5"

    def test_minor_x_range(self):
        assert normalize_range("1.2.x") == ">=1.2.0,<1.3.0"

    def test_major_only(self):
        assert normalize_range("3") == ">=3.0.0,<4.0.0"

    def test_passthrough(self):
        assert normalize_range(">=1.0.0") == ">=1.0.0"


class TestComponentTokens:
    """CLI slug[:constraint] tokens."""

    def test_tokenize(self):
        assert tokenize_rightmost_colon("akismet:^5.0") == ("akismet", "^5.0")
        assert tokenize_rightmost_colon("akismet") == ("akismet", None)
        assert tokenize_rightmost_colon("akismet:") == ("akismet", None)

    def test_slug_only_defaults_to_latest(self):
        assert parse_component_token("akismet") == ComponentRequest(slug="akismet", constraint=LATEST)

    def test_slug_with_range(self):
        req = parse_component_token("woocommerce:>=8.0.0")
        assert req.slug == "woocommerce"
        assert req.constraint.kind == ConstraintKind.RANGE

    def test_empty_slug_rejected(self):
        with pytest.raises(InvalidConstraint):
            parse_component_token(":1.0.0")

    def test_build_environment_request_preserves_order(self):
        req = build_environment_request("6.4.2", ["b", "a:1.0.0", "c"], ["t2", "t1"])
        assert req.core_constraint.kind == ConstraintKind.EXACT
        assert [p.slug for p in req.plugins] == ["b", "a", "c"]
        assert [t.slug for t in req.themes] == ["t2", "t1"]
        assert isinstance(req.plugins, tuple)
