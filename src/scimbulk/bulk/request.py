"""Bulk request aggregate.

A ``BulkRequest`` is an ordered batch of ``BulkOperation`` values plus
an optional failure threshold.  Insertion order is execution order:
a bulk reference may only point at an operation that appears *earlier*
in the request.

Usage
-----
::

    from scimbulk.bulk import BulkOperation, BulkRequest

    request = BulkRequest(failure_count=1)
    request.append(
        BulkOperation.post("/Users", user).with_bulk_id("qwerty"),
        BulkOperation.post("/Groups", group_with_member("bulkId:qwerty")),
    )
    for diagnostic in request.validate():
        print(diagnostic)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

from scimbulk.bulk.executor import BulkExecutor, executor_registry
from scimbulk.bulk.operation import BulkMethod, BulkOperation

if TYPE_CHECKING:
    from scimbulk.bulk.validator import BulkLimits
    from scimbulk.diagnostics import Diagnostic

logger = logging.getLogger(__name__)

BULK_REQUEST_SCHEMA = "urn:ietf:params:scim:schemas:core:2.0:BulkRequest"


class BulkRequest:
    """An ordered batch of bulk operations.

    Parameters
    ----------
    operations:
        Initial operations, in execution order.  ``None`` entries are
        dropped.
    failure_count:
        Number of failed operations the service should tolerate before
        abandoning the rest of the batch.  ``None`` means unbounded;
        negative values are clamped to ``0``.
    """

    def __init__(
        self,
        operations: Iterable[BulkOperation | None] | None = None,
        failure_count: int | None = None,
    ) -> None:
        self._operations: list[BulkOperation] = []
        self._failure_count: int | None = None
        if operations is not None:
            self.append(*operations)
        self.failure_count = failure_count

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def append(self, *operations: BulkOperation | None) -> "BulkRequest":
        """Append operations in argument order, ignoring ``None`` entries."""
        for operation in operations:
            if operation is None:
                continue
            if not isinstance(operation, BulkOperation):
                raise TypeError(
                    f"BulkRequest only holds BulkOperation values, not {type(operation).__name__}"
                )
            self._operations.append(operation)
        return self

    @property
    def operations(self) -> tuple[BulkOperation, ...]:
        """A read-only snapshot of the operations in insertion order."""
        return tuple(self._operations)

    def __iter__(self) -> Iterator[BulkOperation]:
        return iter(tuple(self._operations))

    def __len__(self) -> int:
        return len(self._operations)

    def bulk_ids(self) -> dict[str, int]:
        """Map each bulk id token to the index of the first POST defining it.

        PUT, PATCH and DELETE operations carrying a bulk id *refer* to a
        resource created earlier; they do not define one.
        """
        defined: dict[str, int] = {}
        for index, operation in enumerate(self._operations):
            if operation.method is not BulkMethod.POST:
                continue
            token = operation.bulk_id
            if token is not None and token not in defined:
                defined[token] = index
        return defined

    # ------------------------------------------------------------------
    # Failure threshold
    # ------------------------------------------------------------------

    @property
    def failure_count(self) -> int | None:
        return self._failure_count

    @failure_count.setter
    def failure_count(self, value: int | None) -> None:
        if value is None:
            self._failure_count = None
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"failure_count must be an int or None, not {type(value).__name__}")
        self._failure_count = max(value, 0)

    def set_failure_count(self, value: int | None) -> "BulkRequest":
        """Set the failure threshold and return the request for chaining."""
        self.failure_count = value
        return self

    # ------------------------------------------------------------------
    # Extension seams
    # ------------------------------------------------------------------

    def apply(self, executor: BulkExecutor | str | None = None) -> Any:
        """Hand the request to an executor.

        Parameters
        ----------
        executor:
            A ``BulkExecutor`` instance, the name of one registered in
            ``executor_registry``, or ``None``.  Without an executor this
            is a no-op that returns ``None``.

        Raises
        ------
        PluginNotFoundError
            If ``executor`` is a name that is not registered.
        """
        if executor is None:
            logger.debug("No executor given; %d bulk operation(s) not dispatched", len(self))
            return None
        if isinstance(executor, str):
            executor = executor_registry.create(executor)
        logger.debug("Dispatching %d bulk operation(s) to executor %r", len(self), executor.name)
        return executor.execute(self)

    def validate(self, strict: bool = False, limits: "BulkLimits | None" = None) -> list["Diagnostic"]:
        """Run the structural bulk rules against this request.

        See ``scimbulk.bulk.validator`` for the rule catalogue.
        """
        from scimbulk.bulk.validator import BulkValidator

        return BulkValidator(strict=strict, limits=limits).validate(self)

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BulkRequest):
            return NotImplemented
        return (
            self._operations == other._operations
            and self._failure_count == other._failure_count
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"BulkRequest(operations={len(self._operations)}, "
            f"failure_count={self._failure_count!r})"
        )
