"""SCIM filter expression trees.

Exports the node classes, the visitor base class, the fluent builders,
and the bundled visitors: formatter, evaluator and serializer.
"""
from __future__ import annotations

from scimbulk.filters.builders import and_, co, eq, ew, ge, gt, le, lt, ne, not_, or_, pr, sw
from scimbulk.filters.evaluator import FilterEvaluator, evaluate
from scimbulk.filters.formatter import FilterFormatter, format_filter
from scimbulk.filters.nodes import (
    COMPARISON_FILTERS,
    AndFilter,
    ComparisonFilter,
    ComparisonValue,
    ContainsFilter,
    EndsWithFilter,
    EqualFilter,
    Filter,
    FilterType,
    GreaterOrEqualFilter,
    GreaterThanFilter,
    LessOrEqualFilter,
    LessThanFilter,
    NotEqualFilter,
    NotFilter,
    OrFilter,
    PresentFilter,
    StartsWithFilter,
    comparison,
)
from scimbulk.filters.path import AttributePath
from scimbulk.filters.serializer import FilterSerializer
from scimbulk.filters.visitor import FilterVisitor, dispatch

__all__ = [
    # Nodes
    "Filter",
    "FilterType",
    "ComparisonFilter",
    "ComparisonValue",
    "EqualFilter",
    "NotEqualFilter",
    "ContainsFilter",
    "StartsWithFilter",
    "EndsWithFilter",
    "GreaterThanFilter",
    "GreaterOrEqualFilter",
    "LessThanFilter",
    "LessOrEqualFilter",
    "PresentFilter",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "COMPARISON_FILTERS",
    "comparison",
    "AttributePath",
    # Visitors
    "FilterVisitor",
    "dispatch",
    "FilterFormatter",
    "format_filter",
    "FilterEvaluator",
    "evaluate",
    "FilterSerializer",
    # Builders
    "eq",
    "ne",
    "co",
    "sw",
    "ew",
    "gt",
    "ge",
    "lt",
    "le",
    "pr",
    "and_",
    "or_",
    "not_",
]
