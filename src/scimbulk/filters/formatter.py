"""Render filter trees as SCIM filter text.

``FilterFormatter`` produces the canonical textual form of a filter,
suitable for the ``filter`` query parameter of a SCIM request:

- Operators are written as lowercase keywords (``eq``, ``gt``, ``pr``).
- Values are JSON literals: strings are double-quoted and escaped,
  booleans are ``true`` / ``false`` and ``None`` is ``null``.
- ``not`` always parenthesises its operand, as the grammar requires.
- ``or`` nested inside ``and`` is parenthesised; other nesting follows
  the grammar's precedence (``not`` > ``and`` > ``or``) without extra
  parentheses.

Usage
-----
::

    from scimbulk.filters import FilterFormatter, gt

    FilterFormatter().format(gt("meta.created", "2011-05-13T04:42:34Z"))
    # 'meta.created gt "2011-05-13T04:42:34Z"'
"""
from __future__ import annotations

import json

from scimbulk.filters.nodes import (
    AndFilter,
    ComparisonFilter,
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
from scimbulk.filters.visitor import FilterVisitor


class FilterFormatter(FilterVisitor[str, None]):
    """Visitor that renders a filter tree as SCIM filter text."""

    def format(self, node: Filter) -> str:
        """Return the SCIM filter text for ``node``."""
        return node.visit(self, None)

    # ------------------------------------------------------------------
    # Logical operators
    # ------------------------------------------------------------------

    def visit_and(self, node: AndFilter, param: None) -> str:
        parts = []
        for operand in node.operands:
            text = operand.visit(self, None)
            if isinstance(operand, OrFilter):
                text = f"({text})"
            parts.append(text)
        return " and ".join(parts)

    def visit_or(self, node: OrFilter, param: None) -> str:
        return " or ".join(operand.visit(self, None) for operand in node.operands)

    def visit_not(self, node: NotFilter, param: None) -> str:
        return f"not ({node.operand.visit(self, None)})"

    def visit_present(self, node: PresentFilter, param: None) -> str:
        return f"{node.attribute_path} pr"

    # ------------------------------------------------------------------
    # Comparison operators
    # ------------------------------------------------------------------

    def _comparison(self, node: ComparisonFilter) -> str:
        value = json.dumps(node.comparison_value, ensure_ascii=False)
        return f"{node.attribute_path} {node.filter_type.keyword} {value}"

    def visit_equal(self, node: EqualFilter, param: None) -> str:
        return self._comparison(node)

    def visit_not_equal(self, node: NotEqualFilter, param: None) -> str:
        return self._comparison(node)

    def visit_contains(self, node: ContainsFilter, param: None) -> str:
        return self._comparison(node)

    def visit_starts_with(self, node: StartsWithFilter, param: None) -> str:
        return self._comparison(node)

    def visit_ends_with(self, node: EndsWithFilter, param: None) -> str:
        return self._comparison(node)

    def visit_greater_than(self, node: GreaterThanFilter, param: None) -> str:
        return self._comparison(node)

    def visit_greater_or_equal(self, node: GreaterOrEqualFilter, param: None) -> str:
        return self._comparison(node)

    def visit_less_than(self, node: LessThanFilter, param: None) -> str:
        return self._comparison(node)

    def visit_less_or_equal(self, node: LessOrEqualFilter, param: None) -> str:
        return self._comparison(node)


def format_filter(node: Filter) -> str:
    """Convenience function: render ``node`` as SCIM filter text."""
    return FilterFormatter().format(node)
