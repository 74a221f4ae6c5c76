"""Bulk operation value type.

A ``BulkOperation`` is a single mutation bundled inside a
``BulkRequest``.  Operations are frozen dataclasses: the ``with_*`` and
``as_bulk_id`` helpers return new operations instead of modifying the
receiver, so one operation can safely appear in several requests.

The target of an operation is modelled as a small tagged union:

* ``ExternalId`` — the id of a resource that already exists.
* ``BulkRef`` — a batch-local token naming a resource created by an
  earlier operation of the same request.

At most one of the two is ever set.  ``effective_id`` reports whichever
is present; bulk references are reported in their ``bulkId:<token>``
form so a consumer can tell them apart from real ids.

Usage
-----
::

    from scimbulk.bulk.operation import BulkOperation

    create = BulkOperation.post("/Users", {"userName": "bjensen"}).with_bulk_id("qwerty")
    update = BulkOperation.patch("/Users/2819c223", "2819c223", patch_body)
    remove = BulkOperation.delete("/Groups/e9e30dba", "e9e30dba").with_version('W/"3694e05e"')
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Union

from scimbulk.bulk.references import BULK_ID_PREFIX, strip_bulk_prefix
from scimbulk.errors import InvalidArgumentError, InvalidStateError
from scimbulk.resources import GenericScimResource


class BulkMethod(Enum):
    """HTTP methods allowed inside a bulk request.

    GET is not accepted: bulk operations only express mutations.
    """

    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: "BulkMethod | str") -> "BulkMethod":
        """Return the member for ``value``, accepting any letter case.

        Raises
        ------
        InvalidArgumentError
            If ``value`` does not name one of the four bulk methods.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Unsupported bulk operation method {value!r}; expected one of {allowed}"
            ) from None


@dataclass(frozen=True, slots=True)
class ExternalId:
    """Identifier of a resource that already exists in the service."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise InvalidArgumentError("An external id must be a non-empty string")


@dataclass(frozen=True, slots=True)
class BulkRef:
    """Batch-local forward reference.

    ``token`` is stored bare; ``reference`` gives the prefixed form used
    inside payloads and paths.
    """

    token: str

    def __post_init__(self) -> None:
        if not isinstance(self.token, str):
            raise InvalidArgumentError("A bulk id must be a string")
        object.__setattr__(self, "token", strip_bulk_prefix(self.token))
        if not self.token:
            raise InvalidArgumentError("A bulk id must not be empty")

    @property
    def reference(self) -> str:
        """The ``bulkId:<token>`` form of this reference."""
        return BULK_ID_PREFIX + self.token


Identity = Union[ExternalId, BulkRef]

_PAYLOAD_METHODS = frozenset({BulkMethod.POST, BulkMethod.PUT, BulkMethod.PATCH})
_TARGETED_METHODS = frozenset({BulkMethod.PUT, BulkMethod.PATCH})


@dataclass(frozen=True, repr=False)
class BulkOperation:
    """One requested mutation within a bulk request.

    Prefer the per-method factories (``post``, ``put``, ``patch``,
    ``delete``) over calling the constructor directly; both enforce the
    same rules.

    Parameters
    ----------
    method:
        The HTTP method.  Strings are accepted and normalized.
    path:
        The endpoint the operation targets, e.g. ``"/Users"`` or
        ``"/Users/2819c223"``.
    identity:
        ``None``, an ``ExternalId`` or a ``BulkRef``.
    version:
        Optional ETag used for optimistic concurrency.
    data:
        The resource body.  Required for POST, PUT and PATCH; must be
        ``None`` for DELETE.  A ``Mapping`` is copied into a
        ``GenericScimResource``, so later changes to the caller's dict do
        not reach the operation.  Not part of the hash.

    Raises
    ------
    InvalidArgumentError
        If any of the rules above is violated.
    """

    method: BulkMethod
    path: str
    identity: Identity | None = None
    version: str | None = None
    data: Any = field(default=None, hash=False)

    def __post_init__(self) -> None:
        method = BulkMethod.parse(self.method)
        object.__setattr__(self, "method", method)

        if not isinstance(self.path, str) or not self.path:
            raise InvalidArgumentError(
                f"The 'path' field must be a non-empty string for a {method.value} operation."
            )
        if self.identity is not None and not isinstance(self.identity, (ExternalId, BulkRef)):
            raise InvalidArgumentError(
                f"identity must be an ExternalId or BulkRef, not {type(self.identity).__name__}"
            )

        if method in _PAYLOAD_METHODS and self.data is None:
            raise InvalidArgumentError(
                f"The 'data' field should not be null for a {method.value} operation."
            )
        if isinstance(self.data, Mapping):
            object.__setattr__(self, "data", GenericScimResource(self.data))
        if method is BulkMethod.DELETE and self.data is not None:
            raise InvalidArgumentError("A DELETE operation cannot carry a 'data' payload.")
        if method in _TARGETED_METHODS and self.identity is None:
            raise InvalidArgumentError(
                f"The 'id' field should not be null for a {method.value} operation."
            )
        if method is BulkMethod.POST and isinstance(self.identity, ExternalId):
            raise InvalidArgumentError(
                "A POST operation creates a new resource and cannot target an existing id; "
                "use with_bulk_id() to name it within the request."
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def post(cls, path: str, data: Any) -> "BulkOperation":
        """Create a POST operation that adds a new resource under ``path``."""
        return cls(BulkMethod.POST, path, data=data)

    @classmethod
    def put(cls, path: str, resource_id: str, data: Any) -> "BulkOperation":
        """Create a PUT operation replacing the resource ``resource_id``."""
        return cls(BulkMethod.PUT, path, identity=_external(resource_id, BulkMethod.PUT), data=data)

    @classmethod
    def patch(cls, path: str, resource_id: str, data: Any) -> "BulkOperation":
        """Create a PATCH operation modifying the resource ``resource_id``."""
        return cls(
            BulkMethod.PATCH, path, identity=_external(resource_id, BulkMethod.PATCH), data=data
        )

    @classmethod
    def delete(cls, path: str, resource_id: str | None = None) -> "BulkOperation":
        """Create a DELETE operation.  There is no way to pass a payload."""
        identity = ExternalId(resource_id) if resource_id is not None else None
        return cls(BulkMethod.DELETE, path, identity=identity)

    # ------------------------------------------------------------------
    # Derived copies
    # ------------------------------------------------------------------

    def with_bulk_id(self, bulk_id: str | None) -> "BulkOperation":
        """Return a copy whose identity is the bulk reference ``bulk_id``.

        Any external id is dropped.  Passing ``None`` returns this
        operation unchanged rather than clearing an existing identity.
        """
        if bulk_id is None:
            return self
        return replace(self, identity=BulkRef(bulk_id))

    def as_bulk_id(self) -> "BulkOperation":
        """Return a copy that treats the current external id as a bulk id.

        Use this for PUT, PATCH and DELETE operations whose target is
        created earlier in the same request.

        Raises
        ------
        InvalidStateError
            If the operation has no external id.
        """
        if not isinstance(self.identity, ExternalId):
            raise InvalidStateError(
                f"Cannot convert the id of this {self.method.value} operation to a bulk id: "
                "no external id is set."
            )
        return replace(self, identity=BulkRef(self.identity.value))

    def with_version(self, version: str | None) -> "BulkOperation":
        """Return a copy with the given ETag (``None`` clears it)."""
        return replace(self, version=version)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def effective_id(self) -> str | None:
        """The id this operation targets.

        The external id if there is one, otherwise the ``bulkId:<token>``
        form of the bulk reference, otherwise ``None``.
        """
        if isinstance(self.identity, ExternalId):
            return self.identity.value
        if isinstance(self.identity, BulkRef):
            return self.identity.reference
        return None

    @property
    def external_id(self) -> str | None:
        if isinstance(self.identity, ExternalId):
            return self.identity.value
        return None

    @property
    def bulk_id(self) -> str | None:
        """The bare bulk id token, as it appears on the wire."""
        if isinstance(self.identity, BulkRef):
            return self.identity.token
        return None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        from scimbulk.bulk.serializer import BulkSerializer

        return BulkSerializer().operation_to_json(self, indent=None)

    def __repr__(self) -> str:
        return f"BulkOperation({self})"


def _external(resource_id: str | None, method: BulkMethod) -> ExternalId:
    if resource_id is None:
        raise InvalidArgumentError(
            f"The 'id' field should not be null for a {method.value} operation."
        )
    return ExternalId(resource_id)
