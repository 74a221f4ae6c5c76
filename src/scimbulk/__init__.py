"""scim-bulk — SCIM 2.0 bulk request model and filter expression trees.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import scimbulk
    from scimbulk import BulkOperation, BulkRequest

    request = BulkRequest(failure_count=1).append(
        BulkOperation.post("/Users", {"userName": "bjensen"}).with_bulk_id("qwerty"),
        BulkOperation.post("/Groups", {
            "displayName": "Tour Guides",
            "members": [{"type": "User", "value": "bulkId:qwerty"}],
        }).with_bulk_id("ytrewq"),
    )

    # Check ordering and references before sending
    diagnostics = scimbulk.validate(request)

    # Wire form for the POST /Bulk body
    body = scimbulk.dumps(request)

    # Filters are immutable trees consumed by visitors
    recent = scimbulk.filters.gt("meta.created", "2011-05-13T04:42:34Z")
    str(recent)  # 'meta.created gt "2011-05-13T04:42:34Z"'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from scimbulk import filters
from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef, ExternalId
from scimbulk.bulk.request import BulkRequest
from scimbulk.errors import (
    InvalidArgumentError,
    InvalidStateError,
    ScimBulkError,
    UnresolvedBulkIdError,
    UnsupportedFilterError,
)
from scimbulk.resources import GenericScimResource

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from scimbulk.bulk.validator import BulkLimits
    from scimbulk.diagnostics import Diagnostic


def validate(
    request: BulkRequest, strict: bool = False, limits: "BulkLimits | None" = None
) -> list["Diagnostic"]:
    """Validate a ``BulkRequest`` against all built-in rules.

    Parameters
    ----------
    request:
        The bulk request to check.
    strict:
        When ``True``, warnings are promoted to errors.
    limits:
        Optional service limits (``BulkLimits``).

    Returns
    -------
    list[Diagnostic]
        All findings, request-level first, then by operation index.
    """
    from scimbulk.bulk.validator import validate as _validate

    return _validate(request, strict=strict, limits=limits)


def dumps(request: BulkRequest, indent: int | None = 2) -> str:
    """Serialize a ``BulkRequest`` to its JSON wire form."""
    from scimbulk.bulk.serializer import BulkSerializer

    return BulkSerializer().to_json(request, indent=indent)


def loads(text: str) -> BulkRequest:
    """Deserialize a ``BulkRequest`` from its JSON wire form.

    Raises
    ------
    InvalidArgumentError
        If the text is not valid JSON or not a well-formed bulk request.
    """
    from scimbulk.bulk.serializer import BulkSerializer

    return BulkSerializer().from_json(text)


__all__ = [
    "__version__",
    "BulkMethod",
    "BulkOperation",
    "BulkRef",
    "ExternalId",
    "BulkRequest",
    "GenericScimResource",
    "ScimBulkError",
    "InvalidArgumentError",
    "InvalidStateError",
    "UnsupportedFilterError",
    "UnresolvedBulkIdError",
    "filters",
    "validate",
    "dumps",
    "loads",
]
