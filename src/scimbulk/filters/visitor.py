"""Visitor protocol for filter trees.

A ``FilterVisitor[R, P]`` has one method per filter class.  ``R`` is
the result type and ``P`` the type of the extra parameter threaded
through every call (``None`` when unused).  A node's ``visit`` method
calls exactly one of them, so adding a consumer never requires touching
the node classes.

Every handler defaults to raising ``UnsupportedFilterError``.  A
visitor only overrides the operators it understands; when it meets any
other node, including node classes added after it was written, the
caller gets an error instead of a silently wrong answer.

Example
-------
::

    class AttributeCollector(FilterVisitor[None, set]):
        def visit_equal(self, node, param):
            param.add(str(node.attribute_path))

    names: set[str] = set()
    eq("userName", "bjensen").visit(AttributeCollector(), names)
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Generic, NoReturn, TypeVar

from scimbulk.errors import UnsupportedFilterError

if TYPE_CHECKING:
    from scimbulk.filters.nodes import (
        AndFilter,
        ContainsFilter,
        EndsWithFilter,
        EqualFilter,
        Filter,
        GreaterOrEqualFilter,
        GreaterThanFilter,
        LessOrEqualFilter,
        LessThanFilter,
        NotEqualFilter,
        NotFilter,
        OrFilter,
        PresentFilter,
        StartsWithFilter,
    )

R = TypeVar("R")
P = TypeVar("P")


class FilterVisitor(Generic[R, P]):
    """Base class for filter tree consumers.  Override what you support."""

    def unsupported(self, node: "Filter") -> NoReturn:
        """Raise ``UnsupportedFilterError`` for ``node``."""
        raise UnsupportedFilterError(node.filter_type.keyword, type(self).__name__)

    # Logical operators

    def visit_and(self, node: "AndFilter", param: P) -> R:
        self.unsupported(node)

    def visit_or(self, node: "OrFilter", param: P) -> R:
        self.unsupported(node)

    def visit_not(self, node: "NotFilter", param: P) -> R:
        self.unsupported(node)

    # Presence

    def visit_present(self, node: "PresentFilter", param: P) -> R:
        self.unsupported(node)

    # Comparison operators

    def visit_equal(self, node: "EqualFilter", param: P) -> R:
        self.unsupported(node)

    def visit_not_equal(self, node: "NotEqualFilter", param: P) -> R:
        self.unsupported(node)

    def visit_contains(self, node: "ContainsFilter", param: P) -> R:
        self.unsupported(node)

    def visit_starts_with(self, node: "StartsWithFilter", param: P) -> R:
        self.unsupported(node)

    def visit_ends_with(self, node: "EndsWithFilter", param: P) -> R:
        self.unsupported(node)

    def visit_greater_than(self, node: "GreaterThanFilter", param: P) -> R:
        self.unsupported(node)

    def visit_greater_or_equal(self, node: "GreaterOrEqualFilter", param: P) -> R:
        self.unsupported(node)

    def visit_less_than(self, node: "LessThanFilter", param: P) -> R:
        self.unsupported(node)

    def visit_less_or_equal(self, node: "LessOrEqualFilter", param: P) -> R:
        self.unsupported(node)


def dispatch(node: "Filter", visitor: FilterVisitor[R, P], param: P = None) -> R:
    """Run ``visitor`` over ``node``; equivalent to ``node.visit(visitor, param)``."""
    return node.visit(visitor, param)
