"""SCIM bulk request model.

Exports the bulk operation and request types, the wire serializer, the
bulk id resolver used by executors, and the structural validator.
"""
from __future__ import annotations

from scimbulk.bulk.executor import EXECUTOR_ENTRYPOINT_GROUP, BulkExecutor, executor_registry
from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef, ExternalId, Identity
from scimbulk.bulk.references import (
    BULK_ID_PREFIX,
    find_bulk_references,
    is_bulk_reference,
    strip_bulk_prefix,
    substitute_bulk_references,
    to_bulk_reference,
)
from scimbulk.bulk.request import BULK_REQUEST_SCHEMA, BulkRequest
from scimbulk.bulk.resolver import BulkIdResolver
from scimbulk.bulk.serializer import BulkSerializer
from scimbulk.bulk.validator import DEFAULT_RULES, BulkLimits, BulkValidator, Rule, validate

__all__ = [
    # Values
    "BulkMethod",
    "BulkOperation",
    "BulkRef",
    "ExternalId",
    "Identity",
    "BulkRequest",
    "BULK_REQUEST_SCHEMA",
    # References
    "BULK_ID_PREFIX",
    "is_bulk_reference",
    "strip_bulk_prefix",
    "to_bulk_reference",
    "find_bulk_references",
    "substitute_bulk_references",
    "BulkIdResolver",
    # Execution
    "BulkExecutor",
    "executor_registry",
    "EXECUTOR_ENTRYPOINT_GROUP",
    # Serialization and validation
    "BulkSerializer",
    "BulkValidator",
    "BulkLimits",
    "Rule",
    "DEFAULT_RULES",
    "validate",
]
