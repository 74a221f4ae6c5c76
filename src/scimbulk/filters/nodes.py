"""Filter expression node definitions.

Every filter node is a frozen dataclass, so filter trees are immutable
and hashable.  Each SCIM operator is its own concrete class rather than
a field on a shared class; a node's only behaviour is ``visit``, which
calls the one ``FilterVisitor`` method matching its class.  Consumers
(formatters, evaluators, query translators) are written as visitors
and never need ``isinstance`` chains.

Two comparison nodes are equal only when they are of the same class and
their ``attribute_path`` and ``comparison_value`` are equal, so
``gt("meta.created", t) != ge("meta.created", t)``.  A boolean value
never equals a number: ``eq("active", True) != eq("active", 1)``.

Comparison values
-----------------
* ``eq`` / ``ne`` accept any scalar, including ``None`` (``attr eq null``).
  Floats must be finite everywhere.
* ``gt`` / ``ge`` / ``lt`` / ``le`` reject ``None`` and booleans, which
  have no ordering in SCIM.
* ``co`` / ``sw`` / ``ew`` require a string.
* ``pr`` carries no value at all.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, Union

from scimbulk.errors import InvalidArgumentError
from scimbulk.filters.path import AttributePath

if TYPE_CHECKING:
    from scimbulk.filters.visitor import FilterVisitor

R = TypeVar("R")
P = TypeVar("P")

ComparisonValue = Union[str, int, float, bool, None]

_SCALAR_TYPES = (str, int, float, bool)


class FilterType(Enum):
    """Filter operators, valued by their SCIM keyword."""

    AND = "and"
    OR = "or"
    NOT = "not"
    PRESENT = "pr"
    EQUAL = "eq"
    NOT_EQUAL = "ne"
    CONTAINS = "co"
    STARTS_WITH = "sw"
    ENDS_WITH = "ew"
    GREATER_THAN = "gt"
    GREATER_OR_EQUAL = "ge"
    LESS_THAN = "lt"
    LESS_OR_EQUAL = "le"

    @property
    def keyword(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------


class Filter(ABC):
    """Root of the filter node hierarchy."""

    filter_type: ClassVar[FilterType]

    @abstractmethod
    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        """Dispatch to the ``visitor`` method for this node's class."""

    @property
    def is_logical(self) -> bool:
        """True for ``and``, ``or`` and ``not`` nodes."""
        return self.filter_type in (FilterType.AND, FilterType.OR, FilterType.NOT)

    def __str__(self) -> str:
        from scimbulk.filters.formatter import FilterFormatter

        return FilterFormatter().format(self)


@dataclass(frozen=True, repr=False, eq=False)
class ComparisonFilter(Filter):
    """A node comparing an attribute against a literal value.

    Parameters
    ----------
    attribute_path:
        The compared attribute.  Strings are parsed with
        ``AttributePath.of``.
    comparison_value:
        The literal on the right-hand side.
    """

    attribute_path: AttributePath
    comparison_value: ComparisonValue

    def __post_init__(self) -> None:
        if self.attribute_path is None:
            raise InvalidArgumentError(
                f"A '{self.filter_type.keyword}' filter requires an attribute path"
            )
        object.__setattr__(self, "attribute_path", AttributePath.of(self.attribute_path))
        value = self.comparison_value
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise InvalidArgumentError(
                f"A '{self.filter_type.keyword}' filter value must be a string, number, "
                f"boolean or null, not {type(value).__name__}"
            )
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidArgumentError(
                f"A '{self.filter_type.keyword}' filter value must be a finite number, "
                f"not {value!r}"
            )
        self._check_value(value)

    def _check_value(self, value: ComparisonValue) -> None:
        """Hook for operator-specific value rules; the default accepts any scalar."""

    def _key(self) -> tuple[Any, ...]:
        # bool is an int subclass; True == 1 must not make two nodes equal.
        value = self.comparison_value
        return (type(self), self.attribute_path, isinstance(value, bool), value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComparisonFilter):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.attribute_path)!r}, {self.comparison_value!r})"


@dataclass(frozen=True, repr=False, eq=False)
class _OrderingFilter(ComparisonFilter):
    def _check_value(self, value: ComparisonValue) -> None:
        if value is None or isinstance(value, bool):
            raise InvalidArgumentError(
                f"A '{self.filter_type.keyword}' filter needs a string or numeric value, "
                f"not {value!r}"
            )


@dataclass(frozen=True, repr=False, eq=False)
class _SubstringFilter(ComparisonFilter):
    def _check_value(self, value: ComparisonValue) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError(
                f"A '{self.filter_type.keyword}' filter needs a string value, not {value!r}"
            )


# ---------------------------------------------------------------------------
# Comparison nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, repr=False, eq=False)
class EqualFilter(ComparisonFilter):
    """``attr eq value``"""

    filter_type: ClassVar[FilterType] = FilterType.EQUAL

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_equal(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class NotEqualFilter(ComparisonFilter):
    """``attr ne value``"""

    filter_type: ClassVar[FilterType] = FilterType.NOT_EQUAL

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_not_equal(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class ContainsFilter(_SubstringFilter):
    """``attr co value``: the attribute contains the value as a substring."""

    filter_type: ClassVar[FilterType] = FilterType.CONTAINS

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_contains(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class StartsWithFilter(_SubstringFilter):
    """``attr sw value``"""

    filter_type: ClassVar[FilterType] = FilterType.STARTS_WITH

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_starts_with(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class EndsWithFilter(_SubstringFilter):
    """``attr ew value``"""

    filter_type: ClassVar[FilterType] = FilterType.ENDS_WITH

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_ends_with(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class GreaterThanFilter(_OrderingFilter):
    """``attr gt value``: the attribute is strictly greater than the value.

    Strings compare lexicographically, which for SCIM ``dateTime``
    values in a single time zone is chronological order.
    """

    filter_type: ClassVar[FilterType] = FilterType.GREATER_THAN

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_greater_than(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class GreaterOrEqualFilter(_OrderingFilter):
    """``attr ge value``"""

    filter_type: ClassVar[FilterType] = FilterType.GREATER_OR_EQUAL

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_greater_or_equal(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class LessThanFilter(_OrderingFilter):
    """``attr lt value``"""

    filter_type: ClassVar[FilterType] = FilterType.LESS_THAN

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_less_than(self, param)


@dataclass(frozen=True, repr=False, eq=False)
class LessOrEqualFilter(_OrderingFilter):
    """``attr le value``"""

    filter_type: ClassVar[FilterType] = FilterType.LESS_OR_EQUAL

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_less_or_equal(self, param)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


@dataclass(frozen=True, repr=False)
class PresentFilter(Filter):
    """``attr pr``: the attribute has a non-empty value."""

    attribute_path: AttributePath

    filter_type: ClassVar[FilterType] = FilterType.PRESENT

    def __post_init__(self) -> None:
        if self.attribute_path is None:
            raise InvalidArgumentError("A 'pr' filter requires an attribute path")
        object.__setattr__(self, "attribute_path", AttributePath.of(self.attribute_path))

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_present(self, param)

    def __repr__(self) -> str:
        return f"PresentFilter({str(self.attribute_path)!r})"


# ---------------------------------------------------------------------------
# Logical nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, repr=False)
class _CombiningFilter(Filter):
    operands: tuple[Filter, ...]

    def __post_init__(self) -> None:
        operands = tuple(self.operands)
        if len(operands) < 2:
            raise InvalidArgumentError(
                f"An '{self.filter_type.keyword}' filter needs at least two operands"
            )
        for operand in operands:
            if not isinstance(operand, Filter):
                raise InvalidArgumentError(
                    f"'{self.filter_type.keyword}' operands must be filters, "
                    f"not {type(operand).__name__}"
                )
        object.__setattr__(self, "operands", operands)

    def __repr__(self) -> str:
        inner = ", ".join(repr(op) for op in self.operands)
        return f"{type(self).__name__}({inner})"


@dataclass(frozen=True, repr=False)
class AndFilter(_CombiningFilter):
    """All operands must match."""

    filter_type: ClassVar[FilterType] = FilterType.AND

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_and(self, param)


@dataclass(frozen=True, repr=False)
class OrFilter(_CombiningFilter):
    """At least one operand must match."""

    filter_type: ClassVar[FilterType] = FilterType.OR

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_or(self, param)


@dataclass(frozen=True, repr=False)
class NotFilter(Filter):
    """Negates its operand."""

    operand: Filter

    filter_type: ClassVar[FilterType] = FilterType.NOT

    def __post_init__(self) -> None:
        if not isinstance(self.operand, Filter):
            raise InvalidArgumentError(
                f"'not' wraps a filter, not {type(self.operand).__name__}"
            )

    def visit(self, visitor: "FilterVisitor[R, P]", param: P = None) -> R:
        return visitor.visit_not(self, param)

    def __repr__(self) -> str:
        return f"NotFilter({self.operand!r})"


COMPARISON_FILTERS: dict[FilterType, type[ComparisonFilter]] = {
    cls.filter_type: cls
    for cls in (
        EqualFilter,
        NotEqualFilter,
        ContainsFilter,
        StartsWithFilter,
        EndsWithFilter,
        GreaterThanFilter,
        GreaterOrEqualFilter,
        LessThanFilter,
        LessOrEqualFilter,
    )
}


def comparison(filter_type: FilterType | str, path: Any, value: ComparisonValue) -> ComparisonFilter:
    """Build the comparison node for ``filter_type`` (a ``FilterType`` or keyword).

    Raises
    ------
    InvalidArgumentError
        If ``filter_type`` is not a comparison operator.
    """
    try:
        kind = filter_type if isinstance(filter_type, FilterType) else FilterType(str(filter_type).lower())
        cls = COMPARISON_FILTERS[kind]
    except (ValueError, KeyError):
        raise InvalidArgumentError(f"{filter_type!r} is not a comparison operator") from None
    return cls(path, value)
