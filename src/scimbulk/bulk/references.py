"""Helpers for the textual form of bulk references.

Inside a bulk request an operation may point at a resource created by
an earlier operation of the same request by writing ``"bulkId:<token>"``
wherever a resource id is expected (RFC 7644 section 3.7.2).  The
``bulkId:`` prefix is what distinguishes such a reference from a real
resource identifier.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

BULK_ID_PREFIX = "bulkId:"


def is_bulk_reference(value: object) -> bool:
    """Return True if ``value`` is a string in ``bulkId:<token>`` form."""
    return isinstance(value, str) and value.startswith(BULK_ID_PREFIX)


def strip_bulk_prefix(value: str) -> str:
    """Return ``value`` without a leading ``bulkId:`` prefix, if any."""
    if value.startswith(BULK_ID_PREFIX):
        return value[len(BULK_ID_PREFIX):]
    return value


def to_bulk_reference(token: str) -> str:
    """Return the ``bulkId:<token>`` reference form of ``token``.

    A token that already carries the prefix is returned unchanged.
    """
    return BULK_ID_PREFIX + strip_bulk_prefix(token)


def find_bulk_references(data: Any) -> list[str]:
    """Collect the tokens of all bulk references inside a JSON structure.

    Dicts and lists are walked depth-first in document order; only string
    values that are entirely a reference are reported.

    Example
    -------
    ::

        >>> find_bulk_references({"members": [{"value": "bulkId:qwerty"}]})
        ['qwerty']
    """
    found: list[str] = []
    _walk(data, found)
    return found


def _walk(node: Any, found: list[str]) -> None:
    if is_bulk_reference(node):
        found.append(strip_bulk_prefix(node))
    elif isinstance(node, Mapping):
        for value in node.values():
            _walk(value, found)
    elif isinstance(node, (list, tuple)):
        for item in node:
            _walk(item, found)


def substitute_bulk_references(data: Any, lookup: Callable[[str], str]) -> Any:
    """Return a copy of ``data`` with every bulk reference replaced.

    ``lookup`` receives the bare token and returns the resource id to put
    in its place.  Exceptions raised by ``lookup`` propagate.
    """
    if is_bulk_reference(data):
        return lookup(strip_bulk_prefix(data))
    if isinstance(data, Mapping):
        return {key: substitute_bulk_references(value, lookup) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [substitute_bulk_references(item, lookup) for item in data]
    return data
