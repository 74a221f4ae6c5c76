"""In-memory evaluation of filter trees against SCIM resources.

``FilterEvaluator`` decides whether a resource (a JSON object, or
anything with ``to_dict()``) matches a filter, following the matching
rules of RFC 7644 section 3.4.2.2:

- Attribute names match case-insensitively.
- Strings compare case-insensitively unless ``case_exact=True``.
- A multi-valued attribute matches when any of its values matches.
  Complex values are compared through their ``value`` sub-attribute.
- ``attr eq null`` matches when the attribute is absent.
- Ordering between values of different types (a number and a string,
  for example) never matches.

Attributes qualified with an extension schema URN are looked up inside
the extension's object, e.g.
``urn:ietf:params:scim:schemas:extension:enterprise:2.0:User:employeeNumber``.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

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
from scimbulk.filters.path import AttributePath
from scimbulk.filters.visitor import FilterVisitor
from scimbulk.resources import resource_to_dict


class FilterEvaluator(FilterVisitor[bool, Mapping[str, Any]]):
    """Visitor that matches a filter tree against a resource.

    Parameters
    ----------
    case_exact:
        Compare strings case-sensitively.  SCIM attributes default to
        ``caseExact: false``.
    """

    def __init__(self, case_exact: bool = False) -> None:
        self._case_exact = case_exact

    def matches(self, node: Filter, resource: Any) -> bool:
        """Return True if ``resource`` satisfies ``node``."""
        return node.visit(self, resource_to_dict(resource))

    # ------------------------------------------------------------------
    # Logical operators
    # ------------------------------------------------------------------

    def visit_and(self, node: AndFilter, param: Mapping[str, Any]) -> bool:
        return all(operand.visit(self, param) for operand in node.operands)

    def visit_or(self, node: OrFilter, param: Mapping[str, Any]) -> bool:
        return any(operand.visit(self, param) for operand in node.operands)

    def visit_not(self, node: NotFilter, param: Mapping[str, Any]) -> bool:
        return not node.operand.visit(self, param)

    def visit_present(self, node: PresentFilter, param: Mapping[str, Any]) -> bool:
        return any(_has_value(v) for v in self._values(param, node.attribute_path))

    # ------------------------------------------------------------------
    # Comparison operators
    # ------------------------------------------------------------------

    def visit_equal(self, node: EqualFilter, param: Mapping[str, Any]) -> bool:
        values = self._values(param, node.attribute_path)
        if node.comparison_value is None:
            return not any(_has_value(v) for v in values)
        return any(self._equals(v, node.comparison_value) for v in values)

    def visit_not_equal(self, node: NotEqualFilter, param: Mapping[str, Any]) -> bool:
        return not self.visit_equal(EqualFilter(node.attribute_path, node.comparison_value), param)

    def visit_contains(self, node: ContainsFilter, param: Mapping[str, Any]) -> bool:
        return self._match_text(node, param, lambda value, target: target in value)

    def visit_starts_with(self, node: StartsWithFilter, param: Mapping[str, Any]) -> bool:
        return self._match_text(node, param, str.startswith)

    def visit_ends_with(self, node: EndsWithFilter, param: Mapping[str, Any]) -> bool:
        return self._match_text(node, param, str.endswith)

    def visit_greater_than(self, node: GreaterThanFilter, param: Mapping[str, Any]) -> bool:
        return self._match_order(node, param, lambda c: c > 0)

    def visit_greater_or_equal(self, node: GreaterOrEqualFilter, param: Mapping[str, Any]) -> bool:
        return self._match_order(node, param, lambda c: c >= 0)

    def visit_less_than(self, node: LessThanFilter, param: Mapping[str, Any]) -> bool:
        return self._match_order(node, param, lambda c: c < 0)

    def visit_less_or_equal(self, node: LessOrEqualFilter, param: Mapping[str, Any]) -> bool:
        return self._match_order(node, param, lambda c: c <= 0)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _values(self, resource: Mapping[str, Any], path: AttributePath) -> list[Any]:
        """Collect every value ``path`` reaches, flattening multi-valued attributes."""
        root: Any = resource
        if path.schema:
            extension = _get(resource, path.schema)
            if isinstance(extension, Mapping):
                root = extension
        current: list[Any] = [root]
        for name in path.parts:
            found: list[Any] = []
            for item in current:
                if not isinstance(item, Mapping):
                    continue
                value = _get(item, name)
                if isinstance(value, list):
                    found.extend(value)
                elif value is not None:
                    found.append(value)
            current = found
        return [_primary(v) for v in current]

    def _fold(self, text: str) -> str:
        return text if self._case_exact else text.casefold()

    def _equals(self, value: Any, target: Any) -> bool:
        if isinstance(value, str) and isinstance(target, str):
            return self._fold(value) == self._fold(target)
        if isinstance(value, bool) or isinstance(target, bool):
            return isinstance(value, bool) and isinstance(target, bool) and value == target
        return value == target

    def _match_text(self, node: ComparisonFilter, param: Mapping[str, Any], test: Any) -> bool:
        target = self._fold(str(node.comparison_value))
        return any(
            isinstance(v, str) and test(self._fold(v), target)
            for v in self._values(param, node.attribute_path)
        )

    def _match_order(self, node: ComparisonFilter, param: Mapping[str, Any], test: Any) -> bool:
        for value in self._values(param, node.attribute_path):
            result = self._compare(value, node.comparison_value)
            if result is not None and test(result):
                return True
        return False

    def _compare(self, value: Any, target: Any) -> int | None:
        """Three-way comparison, or ``None`` when the types do not order."""
        if isinstance(value, str) and isinstance(target, str):
            left, right = self._fold(value), self._fold(target)
        elif _is_number(value) and _is_number(target):
            left, right = value, target
        else:
            return None
        return (left > right) - (left < right)


def _get(mapping: Mapping[str, Any], name: str) -> Any:
    if name in mapping:
        return mapping[name]
    lowered = name.lower()
    for key, value in mapping.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _primary(value: Any) -> Any:
    # complex multi-valued entries compare through their "value" sub-attribute
    if isinstance(value, Mapping):
        inner = _get(value, "value")
        return inner if inner is not None else value
    return value


def _has_value(value: Any) -> bool:
    return value not in (None, "") and not (isinstance(value, (Mapping, list)) and not value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def evaluate(node: Filter, resource: Any, case_exact: bool = False) -> bool:
    """Convenience function: return True if ``resource`` matches ``node``."""
    return FilterEvaluator(case_exact=case_exact).matches(node, resource)
