"""Resource payload carrier used as the body of bulk operations.

The library treats resource bodies as opaque JSON objects.  Anything
that is a ``Mapping`` or exposes ``to_dict()`` can be used as a payload;
``GenericScimResource`` is the bundled carrier.
"""
from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


class GenericScimResource:
    """A schema-agnostic SCIM resource backed by a plain dict.

    The wrapped dict is deep-copied on the way in and on the way out,
    so a resource handed to a ``BulkOperation`` cannot be changed behind
    the operation's back.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))

    @property
    def schemas(self) -> list[str]:
        """The ``schemas`` attribute, or an empty list if absent."""
        return list(self._data.get("schemas", []))

    def get(self, name: str, default: Any = None) -> Any:
        """Return a top-level attribute, matching the name case-insensitively."""
        for key, value in self._data.items():
            if key.lower() == name.lower():
                return copy.deepcopy(value)
        return default

    def to_dict(self) -> dict[str, Any]:
        """Return a deep copy of the underlying JSON object."""
        return copy.deepcopy(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenericScimResource):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"GenericScimResource({self._data!r})"


def resource_to_dict(resource: Any) -> dict[str, Any]:
    """Convert a payload to a JSON-compatible dict.

    Raises
    ------
    TypeError
        If ``resource`` is neither a ``Mapping`` nor has ``to_dict()``.
    """
    if isinstance(resource, Mapping):
        return copy.deepcopy(dict(resource))
    to_dict = getattr(resource, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Cannot convert {type(resource).__name__} to a resource dict")
