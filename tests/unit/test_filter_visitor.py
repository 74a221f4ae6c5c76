"""Unit tests for scimbulk.filters.visitor — double dispatch and the
fail-closed default handlers.
"""
from __future__ import annotations

import pytest

from scimbulk.errors import UnsupportedFilterError
from scimbulk.filters import (
    AndFilter,
    EqualFilter,
    Filter,
    FilterVisitor,
    GreaterThanFilter,
    and_,
    co,
    dispatch,
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


class EqualityOnly(FilterVisitor[str, None]):
    """Understands ``eq`` and nothing else."""

    def visit_equal(self, node: EqualFilter, param: None) -> str:
        return f"{node.attribute_path}={node.comparison_value}"


class MethodRecorder(FilterVisitor[str, list]):
    """Records which handler each node reached."""

    def visit_and(self, node, param): return "and"
    def visit_or(self, node, param): return "or"
    def visit_not(self, node, param): return "not"
    def visit_present(self, node, param): return "present"
    def visit_equal(self, node, param): return "equal"
    def visit_not_equal(self, node, param): return "not_equal"
    def visit_contains(self, node, param): return "contains"
    def visit_starts_with(self, node, param): return "starts_with"
    def visit_ends_with(self, node, param): return "ends_with"
    def visit_greater_than(self, node, param): return "greater_than"
    def visit_greater_or_equal(self, node, param): return "greater_or_equal"
    def visit_less_than(self, node, param): return "less_than"
    def visit_less_or_equal(self, node, param): return "less_or_equal"


class AttributeCollector(FilterVisitor[None, set]):
    def visit_and(self, node: AndFilter, param: set) -> None:
        for operand in node.operands:
            operand.visit(self, param)

    def visit_greater_than(self, node: GreaterThanFilter, param: set) -> None:
        param.add(str(node.attribute_path))

    def visit_equal(self, node: EqualFilter, param: set) -> None:
        param.add(str(node.attribute_path))


class TestDispatch:
    @pytest.mark.parametrize("node, expected", [
        (and_(eq("a", 1), eq("b", 2)), "and"),
        (or_(eq("a", 1), eq("b", 2)), "or"),
        (not_(pr("a")), "not"),
        (pr("a"), "present"),
        (eq("a", 1), "equal"),
        (ne("a", 1), "not_equal"),
        (co("a", "x"), "contains"),
        (sw("a", "x"), "starts_with"),
        (ew("a", "x"), "ends_with"),
        (gt("a", 1), "greater_than"),
        (ge("a", 1), "greater_or_equal"),
        (lt("a", 1), "less_than"),
        (le("a", 1), "less_or_equal"),
    ])
    def test_each_node_reaches_its_handler(self, node: Filter, expected: str) -> None:
        assert node.visit(MethodRecorder(), []) == expected

    def test_dispatch_function(self) -> None:
        assert dispatch(eq("userName", "bjensen"), EqualityOnly()) == "userName=bjensen"

    def test_parameter_threaded_through(self) -> None:
        names: set[str] = set()
        and_(gt("meta.created", "2011"), eq("userName", "x")).visit(AttributeCollector(), names)
        assert names == {"meta.created", "userName"}


class TestFailClosed:
    def test_unhandled_node_raises(self) -> None:
        with pytest.raises(UnsupportedFilterError) as info:
            gt("meta.created", "2011-05-13T04:42:34Z").visit(EqualityOnly())
        assert info.value.filter_type == "gt"
        assert info.value.visitor_name == "EqualityOnly"

    def test_message_names_operator_and_visitor(self) -> None:
        with pytest.raises(UnsupportedFilterError, match="'pr'.*EqualityOnly"):
            pr("title").visit(EqualityOnly())

    def test_is_a_type_error(self) -> None:
        with pytest.raises(TypeError):
            or_(eq("a", 1), eq("b", 2)).visit(EqualityOnly())

    def test_base_visitor_handles_nothing(self) -> None:
        with pytest.raises(UnsupportedFilterError):
            eq("a", 1).visit(FilterVisitor())

    def test_nested_unsupported_node_surfaces(self) -> None:
        with pytest.raises(UnsupportedFilterError):
            and_(eq("a", 1), lt("b", 2)).visit(AttributeCollector(), set())
