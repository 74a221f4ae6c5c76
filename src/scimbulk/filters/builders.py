"""Fluent factory functions for filter trees.

Named after the SCIM operator keywords so a filter reads close to its
textual form::

    from scimbulk.filters.builders import and_, eq, gt, pr

    active_recent = and_(
        eq("active", True),
        gt("meta.lastModified", "2011-05-13T04:42:34Z"),
        pr("emails"),
    )
"""
from __future__ import annotations

from scimbulk.filters.nodes import (
    AndFilter,
    ComparisonValue,
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
from scimbulk.filters.path import AttributePath

PathLike = str | AttributePath


def eq(path: PathLike, value: ComparisonValue) -> EqualFilter:
    return EqualFilter(path, value)


def ne(path: PathLike, value: ComparisonValue) -> NotEqualFilter:
    return NotEqualFilter(path, value)


def co(path: PathLike, value: str) -> ContainsFilter:
    return ContainsFilter(path, value)


def sw(path: PathLike, value: str) -> StartsWithFilter:
    return StartsWithFilter(path, value)


def ew(path: PathLike, value: str) -> EndsWithFilter:
    return EndsWithFilter(path, value)


def gt(path: PathLike, value: ComparisonValue) -> GreaterThanFilter:
    return GreaterThanFilter(path, value)


def ge(path: PathLike, value: ComparisonValue) -> GreaterOrEqualFilter:
    return GreaterOrEqualFilter(path, value)


def lt(path: PathLike, value: ComparisonValue) -> LessThanFilter:
    return LessThanFilter(path, value)


def le(path: PathLike, value: ComparisonValue) -> LessOrEqualFilter:
    return LessOrEqualFilter(path, value)


def pr(path: PathLike) -> PresentFilter:
    return PresentFilter(path)


def and_(*operands: Filter) -> AndFilter:
    """Conjunction of two or more filters."""
    return AndFilter(operands)


def or_(*operands: Filter) -> OrFilter:
    """Disjunction of two or more filters."""
    return OrFilter(operands)


def not_(operand: Filter) -> NotFilter:
    return NotFilter(operand)
