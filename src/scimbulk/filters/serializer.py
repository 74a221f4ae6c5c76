"""Filter tree serialization to and from plain dicts, JSON and YAML.

The serialized form tags every node with a ``"kind"`` field holding the
operator keyword, so deserialization is unambiguous::

    {"kind": "and", "operands": [
        {"kind": "eq", "path": "userName", "value": "bjensen"},
        {"kind": "pr", "path": "emails"}
    ]}

Usage
-----
::

    from scimbulk.filters.serializer import FilterSerializer

    serializer = FilterSerializer()
    text = serializer.to_json(node)
    assert serializer.from_json(text) == node
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import yaml

from scimbulk.errors import InvalidArgumentError
from scimbulk.filters.nodes import (
    COMPARISON_FILTERS,
    AndFilter,
    ComparisonFilter,
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
)
from scimbulk.filters.visitor import FilterVisitor


class FilterSerializer(FilterVisitor[dict[str, Any], None]):
    """Converts between filter trees and ``"kind"``-tagged dicts."""

    # ------------------------------------------------------------------
    # Serialization (tree → dict)
    # ------------------------------------------------------------------

    def to_dict(self, node: Filter) -> dict[str, Any]:
        return node.visit(self, None)

    def visit_and(self, node: AndFilter, param: None) -> dict[str, Any]:
        return {"kind": "and", "operands": [op.visit(self, None) for op in node.operands]}

    def visit_or(self, node: OrFilter, param: None) -> dict[str, Any]:
        return {"kind": "or", "operands": [op.visit(self, None) for op in node.operands]}

    def visit_not(self, node: NotFilter, param: None) -> dict[str, Any]:
        return {"kind": "not", "operand": node.operand.visit(self, None)}

    def visit_present(self, node: PresentFilter, param: None) -> dict[str, Any]:
        return {"kind": "pr", "path": str(node.attribute_path)}

    def _comparison(self, node: ComparisonFilter) -> dict[str, Any]:
        return {
            "kind": node.filter_type.keyword,
            "path": str(node.attribute_path),
            "value": node.comparison_value,
        }

    def visit_equal(self, node: EqualFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_not_equal(self, node: NotEqualFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_contains(self, node: ContainsFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_starts_with(self, node: StartsWithFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_ends_with(self, node: EndsWithFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_greater_than(self, node: GreaterThanFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_greater_or_equal(self, node: GreaterOrEqualFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_less_than(self, node: LessThanFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    def visit_less_or_equal(self, node: LessOrEqualFilter, param: None) -> dict[str, Any]:
        return self._comparison(node)

    # ------------------------------------------------------------------
    # Deserialization (dict → tree)
    # ------------------------------------------------------------------

    def from_dict(self, data: Mapping[str, Any]) -> Filter:
        """Rebuild a filter tree.

        Raises
        ------
        InvalidArgumentError
            If a node has an unknown ``kind`` or is missing a field.
        """
        if not isinstance(data, Mapping) or "kind" not in data:
            raise InvalidArgumentError(f"Not a serialized filter node: {data!r}")
        try:
            kind = FilterType(data["kind"])
        except ValueError:
            raise InvalidArgumentError(f"Unknown filter kind: {data['kind']!r}") from None
        try:
            if kind is FilterType.AND:
                return AndFilter(tuple(self.from_dict(op) for op in data["operands"]))
            if kind is FilterType.OR:
                return OrFilter(tuple(self.from_dict(op) for op in data["operands"]))
            if kind is FilterType.NOT:
                return NotFilter(self.from_dict(data["operand"]))
            if kind is FilterType.PRESENT:
                return PresentFilter(data["path"])
            return COMPARISON_FILTERS[kind](data["path"], data.get("value"))
        except KeyError as exc:
            raise InvalidArgumentError(
                f"Serialized {kind.keyword!r} filter is missing field {exc.args[0]!r}"
            ) from None

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, node: Filter, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(node), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> Filter:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Malformed JSON filter: {exc}") from exc
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, node: Filter) -> str:
        return yaml.dump(self.to_dict(node), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> Filter:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidArgumentError(f"Malformed YAML filter: {exc}") from exc
        return self.from_dict(data)
