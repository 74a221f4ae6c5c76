"""Unit tests for scimbulk.filters.nodes and scimbulk.filters.path."""
from __future__ import annotations

import pytest

from scimbulk.errors import InvalidArgumentError
from scimbulk.filters import (
    AndFilter,
    AttributePath,
    EqualFilter,
    FilterType,
    GreaterOrEqualFilter,
    GreaterThanFilter,
    NotFilter,
    PresentFilter,
    and_,
    co,
    comparison,
    eq,
    ew,
    ge,
    gt,
    le,
    lt,
    ne,
    not_,
    or_,
    pr,
    sw,
)

_CREATED = "2011-05-13T04:42:34Z"


# ---------------------------------------------------------------------------
# AttributePath
# ---------------------------------------------------------------------------


class TestAttributePath:
    def test_dotted(self) -> None:
        path = AttributePath.of("name.familyName")
        assert path.attribute == "name"
        assert path.sub_attributes == ("familyName",)
        assert path.schema is None

    def test_schema_qualified(self) -> None:
        text = "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User:employeeNumber"
        path = AttributePath.of(text)
        assert path.schema == "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User"
        assert path.parts == ("employeeNumber",)
        assert str(path) == text

    def test_passes_paths_through(self) -> None:
        path = AttributePath.of("userName")
        assert AttributePath.of(path) is path

    @pytest.mark.parametrize("text", ["", "name..givenName", "name."])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidArgumentError):
            AttributePath.of(text)


# ---------------------------------------------------------------------------
# Comparison nodes
# ---------------------------------------------------------------------------


class TestGreaterThan:
    def test_fields(self) -> None:
        node = gt("meta.created", _CREATED)
        assert node.attribute_path == AttributePath.of("meta.created")
        assert node.comparison_value == _CREATED
        assert node.filter_type is FilterType.GREATER_THAN

    def test_equal_and_same_hash(self) -> None:
        a = GreaterThanFilter("meta.created", _CREATED)
        b = GreaterThanFilter(AttributePath.of("meta.created"), _CREATED)
        assert a == b
        assert hash(a) == hash(b)

    def test_different_kind_not_equal(self) -> None:
        assert gt("meta.created", _CREATED) != GreaterOrEqualFilter("meta.created", _CREATED)

    def test_different_value_not_equal(self) -> None:
        assert gt("meta.created", _CREATED) != gt("meta.created", "2012-01-01T00:00:00Z")

    @pytest.mark.parametrize("flag, number", [(True, 1), (False, 0)])
    def test_boolean_never_equals_number(self, flag: bool, number: int) -> None:
        a, b = eq("active", flag), eq("active", number)
        assert a != b
        assert len({a, b}) == 2
        assert str(a) != str(b)

    def test_int_equals_float(self) -> None:
        assert eq("loginCount", 1) == eq("loginCount", 1.0)
        assert hash(eq("loginCount", 1)) == hash(eq("loginCount", 1.0))

    def test_numeric_value(self) -> None:
        assert gt("loginCount", 10).comparison_value == 10

    @pytest.mark.parametrize("value", [None, True])
    def test_rejects_unordered_values(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError):
            gt("meta.created", value)  # type: ignore[arg-type]

    def test_usable_as_dict_key(self) -> None:
        cache = {gt("meta.created", _CREATED): "cached"}
        assert cache[gt("meta.created", _CREATED)] == "cached"

    def test_immutable(self) -> None:
        node = gt("meta.created", _CREATED)
        with pytest.raises(AttributeError):
            node.comparison_value = "x"  # type: ignore[misc]

    def test_repr(self) -> None:
        assert repr(gt("meta.created", _CREATED)) == (
            f"GreaterThanFilter('meta.created', '{_CREATED}')"
        )


class TestValueRules:
    def test_eq_accepts_null(self) -> None:
        assert eq("title", None).comparison_value is None

    def test_ne_accepts_boolean(self) -> None:
        assert ne("active", False).comparison_value is False

    @pytest.mark.parametrize("builder", [co, sw, ew])
    def test_substring_requires_string(self, builder) -> None:
        with pytest.raises(InvalidArgumentError):
            builder("userName", 5)

    @pytest.mark.parametrize("builder", [ge, lt, le])
    def test_ordering_rejects_null(self, builder) -> None:
        with pytest.raises(InvalidArgumentError):
            builder("meta.created", None)

    def test_non_scalar_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            eq("emails", ["a@example.com"])  # type: ignore[arg-type]

    @pytest.mark.parametrize("builder", [eq, ne, gt, ge, lt, le])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_rejected(self, builder, value: float) -> None:
        with pytest.raises(InvalidArgumentError, match="finite"):
            builder("loginCount", value)


    def test_path_required(self) -> None:
        with pytest.raises(InvalidArgumentError):
            EqualFilter(None, "x")  # type: ignore[arg-type]


class TestComparisonFactory:
    def test_by_keyword(self) -> None:
        assert comparison("gt", "meta.created", _CREATED) == gt("meta.created", _CREATED)

    def test_by_type(self) -> None:
        assert comparison(FilterType.STARTS_WITH, "userName", "J") == sw("userName", "J")

    @pytest.mark.parametrize("kind", ["and", "pr", "xx"])
    def test_rejects_non_comparisons(self, kind: str) -> None:
        with pytest.raises(InvalidArgumentError):
            comparison(kind, "userName", "x")


# ---------------------------------------------------------------------------
# Presence and logical nodes
# ---------------------------------------------------------------------------


class TestPresentAndLogical:
    def test_present(self) -> None:
        assert pr("emails") == PresentFilter("emails")
        assert not pr("emails").is_logical

    def test_and_collects_operands(self) -> None:
        node = and_(eq("a", 1), eq("b", 2), eq("c", 3))
        assert isinstance(node, AndFilter)
        assert len(node.operands) == 3
        assert node.is_logical

    def test_combinators_need_two_operands(self) -> None:
        with pytest.raises(InvalidArgumentError):
            and_(eq("a", 1))
        with pytest.raises(InvalidArgumentError):
            or_()

    def test_operands_must_be_filters(self) -> None:
        with pytest.raises(InvalidArgumentError):
            or_(eq("a", 1), "b eq 2")  # type: ignore[arg-type]

    def test_and_or_not_equal(self) -> None:
        assert and_(eq("a", 1), eq("b", 2)) != or_(eq("a", 1), eq("b", 2))

    def test_not(self) -> None:
        node = not_(pr("title"))
        assert isinstance(node, NotFilter)
        assert node.operand == pr("title")

    def test_not_requires_filter(self) -> None:
        with pytest.raises(InvalidArgumentError):
            not_("title pr")  # type: ignore[arg-type]

    def test_str_is_filter_text(self) -> None:
        assert str(gt("meta.created", _CREATED)) == f'meta.created gt "{_CREATED}"'
