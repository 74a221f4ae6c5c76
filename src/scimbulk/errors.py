"""Exception types raised by scim-bulk.

Every error derives from ``ScimBulkError`` and also from the closest
built-in exception, so callers can catch either the library-specific
class or the familiar ``ValueError`` / ``KeyError`` family.
"""
from __future__ import annotations


class ScimBulkError(Exception):
    """Base class for all scim-bulk errors."""


class InvalidArgumentError(ScimBulkError, ValueError):
    """Raised when a factory or constructor receives malformed input.

    No partially-built object is ever returned when this is raised.
    """


class InvalidStateError(ScimBulkError, RuntimeError):
    """Raised when an operation is not valid for the object's current state."""


class UnsupportedFilterError(ScimBulkError, TypeError):
    """Raised when a visitor has no handler for a filter variant.

    Parameters
    ----------
    filter_type:
        The SCIM operator keyword of the rejected node, e.g. ``"gt"``.
    visitor_name:
        The class name of the visitor that refused the node.
    """

    def __init__(self, filter_type: str, visitor_name: str) -> None:
        self.filter_type = filter_type
        self.visitor_name = visitor_name
        super().__init__(
            f"Unsupported filter type {filter_type!r}: "
            f"{visitor_name} does not handle this operator."
        )


class UnresolvedBulkIdError(ScimBulkError, KeyError):
    """Raised when a bulk reference names a bulk id that has no result yet."""

    def __init__(self, bulk_id: str) -> None:
        self.bulk_id = bulk_id
        super().__init__(
            f"Bulk id {bulk_id!r} has not been resolved. "
            "Only operations earlier in the same request can be referenced."
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
