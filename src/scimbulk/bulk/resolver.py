"""Bulk id bookkeeping for executors.

While an executor works through a bulk request it records the id the
service assigned to each POST that carried a bulk id.  Later operations
are passed through ``BulkIdResolver.resolve_operation`` before they are
dispatched, which swaps every ``bulkId:<token>`` reference for the real
resource id.  Because results are only recorded as operations complete,
a reference can never resolve to an operation later in the request.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef, ExternalId
from scimbulk.bulk.references import (
    is_bulk_reference,
    strip_bulk_prefix,
    substitute_bulk_references,
)
from scimbulk.errors import InvalidStateError, UnresolvedBulkIdError
from scimbulk.resources import GenericScimResource, resource_to_dict

logger = logging.getLogger(__name__)


class BulkIdResolver:
    """Maps bulk id tokens to the resource ids created for them."""

    def __init__(self) -> None:
        self._resolved: dict[str, str] = {}

    def register(self, bulk_id: str, resource_id: str) -> None:
        """Record that the POST tagged ``bulk_id`` created ``resource_id``.

        Raises
        ------
        InvalidStateError
            If ``bulk_id`` was already registered.
        """
        token = strip_bulk_prefix(bulk_id)
        if token in self._resolved:
            raise InvalidStateError(
                f"Bulk id {token!r} is already bound to resource {self._resolved[token]!r}"
            )
        self._resolved[token] = resource_id
        logger.debug("Resolved bulk id %r -> %r", token, resource_id)

    def is_resolved(self, bulk_id: str) -> bool:
        return strip_bulk_prefix(bulk_id) in self._resolved

    def lookup(self, bulk_id: str) -> str:
        """Return the resource id registered for ``bulk_id``.

        Raises
        ------
        UnresolvedBulkIdError
            If nothing has been registered for it yet.
        """
        token = strip_bulk_prefix(bulk_id)
        try:
            return self._resolved[token]
        except KeyError:
            raise UnresolvedBulkIdError(token) from None

    def resolve(self, value: str) -> str:
        """Return ``value`` with a bulk reference replaced; other ids pass through."""
        if is_bulk_reference(value):
            return self.lookup(value)
        return value

    def resolve_operation(self, operation: BulkOperation) -> BulkOperation:
        """Return a copy of ``operation`` with every bulk reference resolved.

        The target of a PUT, PATCH or DELETE carrying a bulk id becomes an
        external id, ``bulkId:<token>`` path segments are rewritten, and
        references inside the payload are substituted.  A POST keeps its
        own bulk id, since that is what the executor registers once the
        POST succeeds.

        Raises
        ------
        UnresolvedBulkIdError
            If any reference has not been registered yet.
        """
        identity = operation.identity
        if operation.method is not BulkMethod.POST and isinstance(identity, BulkRef):
            identity = ExternalId(self.lookup(identity.token))

        path = "/".join(self.resolve(segment) for segment in operation.path.split("/"))

        data = operation.data
        if data is not None:
            data = GenericScimResource(
                substitute_bulk_references(resource_to_dict(data), self.lookup)
            )

        return replace(operation, path=path, identity=identity, data=data)

    def __len__(self) -> int:
        return len(self._resolved)

    def __repr__(self) -> str:
        return f"BulkIdResolver(resolved={len(self._resolved)})"
