"""Wire-format serialization for bulk requests and operations.

The serialized form follows RFC 7644 section 3.7::

    {
      "schemas": ["urn:ietf:params:scim:schemas:core:2.0:BulkRequest"],
      "failureCount": 1,
      "Operations": [
        {"method": "POST", "path": "/Users", "bulkId": "qwerty", "data": {...}},
        {"method": "DELETE", "path": "/Users/2819c223", "version": "W/\\"3694e05e\\""}
      ]
    }

An operation's external id is never written: for PUT, PATCH and DELETE
it is already part of ``path``.  ``bulkId`` is written bare, without the
in-memory ``bulkId:`` prefix.

Usage
-----
::

    from scimbulk.bulk.serializer import BulkSerializer

    serializer = BulkSerializer()
    text = serializer.to_json(request)
    request2 = serializer.from_json(text)
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import yaml

from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef, ExternalId, Identity
from scimbulk.bulk.references import is_bulk_reference
from scimbulk.bulk.request import BULK_REQUEST_SCHEMA, BulkRequest
from scimbulk.errors import InvalidArgumentError
from scimbulk.resources import GenericScimResource, resource_to_dict

# Schema URN registered by RFC 7644; accepted on input alongside our own.
RFC_BULK_REQUEST_SCHEMA = "urn:ietf:params:scim:api:messages:2.0:BulkRequest"

_ACCEPTED_SCHEMAS = frozenset({BULK_REQUEST_SCHEMA, RFC_BULK_REQUEST_SCHEMA})


class BulkSerializer:
    """Converts between bulk objects and their JSON-compatible wire dicts."""

    # ------------------------------------------------------------------
    # Serialization (objects → dict)
    # ------------------------------------------------------------------

    def to_dict(self, request: BulkRequest) -> dict[str, object]:
        """Serialize a ``BulkRequest``.  ``failureCount`` is omitted when unbounded."""
        data: dict[str, object] = {"schemas": [BULK_REQUEST_SCHEMA]}
        if request.failure_count is not None:
            data["failureCount"] = request.failure_count
        data["Operations"] = [self.operation_to_dict(op) for op in request]
        return data

    def operation_to_dict(self, operation: BulkOperation) -> dict[str, object]:
        """Build the wire projection of a single operation."""
        data: dict[str, object] = {
            "method": operation.method.value,
            "path": operation.path,
        }
        if operation.bulk_id is not None:
            data["bulkId"] = operation.bulk_id
        if operation.version is not None:
            data["version"] = operation.version
        if operation.method is not BulkMethod.DELETE:
            data["data"] = resource_to_dict(operation.data)
        return data

    # ------------------------------------------------------------------
    # Deserialization (dict → objects)
    # ------------------------------------------------------------------

    def from_dict(self, data: Mapping[str, Any]) -> BulkRequest:
        """Deserialize a ``BulkRequest``.

        Raises
        ------
        InvalidArgumentError
            If the document is not a bulk request or an operation in it
            is malformed.
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError("A bulk request must be a JSON object")
        schemas = data.get("schemas")
        if schemas is not None and not isinstance(schemas, list):
            raise InvalidArgumentError("'schemas' must be a list")
        if schemas is not None and not _ACCEPTED_SCHEMAS.intersection(schemas):
            raise InvalidArgumentError(
                f"Not a bulk request: schemas {list(schemas)!r} do not include "
                f"{BULK_REQUEST_SCHEMA!r}"
            )
        operations = data.get("Operations", [])
        if not isinstance(operations, list):
            raise InvalidArgumentError("'Operations' must be a list")
        failure_count = data.get("failureCount")
        if failure_count is not None and (
            isinstance(failure_count, bool) or not isinstance(failure_count, int)
        ):
            raise InvalidArgumentError(
                f"'failureCount' must be an integer, not {failure_count!r}"
            )
        return BulkRequest(
            [self.operation_from_dict(op) for op in operations],
            failure_count=failure_count,
        )

    def operation_from_dict(self, data: Mapping[str, Any]) -> BulkOperation:
        """Deserialize a single operation.

        The target of a PUT, PATCH or DELETE without ``bulkId`` is taken
        from the last segment of ``path`` (``/Users/42`` targets ``42``,
        ``/Users/bulkId:q`` targets the bulk id ``q``).
        """
        if not isinstance(data, Mapping):
            raise InvalidArgumentError("A bulk operation must be a JSON object")
        if "method" not in data:
            raise InvalidArgumentError("A bulk operation requires a 'method'")
        method = BulkMethod.parse(data["method"])
        path = data.get("path")
        bulk_id = data.get("bulkId")
        payload = data.get("data")
        if payload is not None and not isinstance(payload, Mapping):
            raise InvalidArgumentError("An operation's 'data' must be a JSON object")
        resource = GenericScimResource(payload) if payload is not None else None

        if method is BulkMethod.POST:
            operation = BulkOperation(method, path, data=resource).with_bulk_id(bulk_id)
        else:
            identity: Identity | None
            if bulk_id is not None:
                identity = BulkRef(bulk_id)
            else:
                identity = _identity_from_path(path)
            operation = BulkOperation(method, path, identity=identity, data=resource)
        return operation.with_version(data.get("version"))

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, request: BulkRequest, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(request), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> BulkRequest:
        try:
            data: dict[str, Any] = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Malformed JSON bulk request: {exc}") from exc
        return self.from_dict(data)

    def operation_to_json(self, operation: BulkOperation, indent: int | None = 2) -> str:
        return json.dumps(self.operation_to_dict(operation), indent=indent, ensure_ascii=False)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, request: BulkRequest) -> str:
        return yaml.dump(
            self.to_dict(request),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def from_yaml(self, text: str) -> BulkRequest:
        try:
            data: dict[str, Any] = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidArgumentError(f"Malformed YAML bulk request: {exc}") from exc
        return self.from_dict(data)


def _identity_from_path(path: Any) -> Identity | None:
    if not isinstance(path, str):
        return None
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        return None
    last = segments[-1]
    if is_bulk_reference(last):
        return BulkRef(last)
    return ExternalId(last)
