"""Abstract base class for bulk request executors.

A ``BulkRequest`` carries no execution state of its own.  Dispatching
its operations, tracking per-operation outcomes and honoring the
request's ``failure_count`` are the job of a ``BulkExecutor``, which is
plugged in through ``BulkRequest.apply``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from scimbulk.plugins.registry import PluginRegistry

if TYPE_CHECKING:
    from scimbulk.bulk.request import BulkRequest

EXECUTOR_ENTRYPOINT_GROUP = "scimbulk.executors"


class BulkExecutor(ABC):
    """Strategy that carries out the operations of a ``BulkRequest``.

    The contract for :meth:`execute` is:

    * Operations are dispatched in request order.
    * A bulk reference is only resolved against operations that came
      earlier in the request (``BulkIdResolver`` does this bookkeeping).
    * Once more than ``request.failure_count`` operations have failed,
      the remaining operations are not dispatched.  ``None`` means no
      limit.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique short name for this executor, e.g. ``"http"``."""

    @abstractmethod
    def execute(self, request: "BulkRequest") -> Any:
        """Carry out ``request`` and return an executor-specific result."""


executor_registry: PluginRegistry[BulkExecutor] = PluginRegistry(
    BulkExecutor, "executors", entrypoint_group=EXECUTOR_ENTRYPOINT_GROUP
)
