#!/usr/bin/env python3
"""Example: Executors — scim-bulk

A toy executor that "creates" resources in a dict.  It shows the
contract every executor follows: operations run in order, bulk
references are resolved only against earlier results, and execution
stops once more than ``failure_count`` operations have failed.

Usage:
    python examples/02_in_memory_executor.py

Requirements:
    pip install scim-bulk
"""
from __future__ import annotations

import itertools
from typing import Any

from scimbulk import BulkOperation, BulkRequest, UnresolvedBulkIdError
from scimbulk.bulk import BulkExecutor, BulkIdResolver, BulkMethod, executor_registry


@executor_registry.register("memory")
class InMemoryExecutor(BulkExecutor):
    def __init__(self) -> None:
        self.store: dict[str, Any] = {}
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return "memory"

    def execute(self, request: BulkRequest) -> list[str]:
        resolver = BulkIdResolver()
        outcomes: list[str] = []
        failures = 0
        for operation in request:
            if request.failure_count is not None and failures > request.failure_count:
                outcomes.append("skipped")
                continue
            try:
                resolved = resolver.resolve_operation(operation)
            except UnresolvedBulkIdError as exc:
                failures += 1
                outcomes.append(f"409 {exc}")
                continue
            if resolved.method is BulkMethod.POST:
                resource_id = str(next(self._ids))
                self.store[resource_id] = resolved.data
                if resolved.bulk_id is not None:
                    resolver.register(resolved.bulk_id, resource_id)
                outcomes.append(f"201 {resolved.path}/{resource_id}")
            elif resolved.method is BulkMethod.DELETE:
                if self.store.pop(resolved.external_id, None) is None:
                    failures += 1
                    outcomes.append(f"404 {resolved.path}")
                else:
                    outcomes.append("204")
            else:
                self.store[resolved.external_id] = resolved.data
                outcomes.append(f"200 {resolved.path}")
        return outcomes


def main() -> None:
    request = BulkRequest(failure_count=0).append(
        BulkOperation.post("/Users", {"userName": "Alice"}).with_bulk_id("qwerty"),
        BulkOperation.post("/Groups", {
            "displayName": "Tour Guides",
            "members": [{"type": "User", "value": "bulkId:qwerty"}],
        }).with_bulk_id("ytrewq"),
        BulkOperation.delete("/Users/404", "404"),
        BulkOperation.delete("/Groups/bulkId:ytrewq", "ytrewq").as_bulk_id(),
    )

    for outcome in request.apply("memory"):
        print(outcome)


if __name__ == "__main__":
    main()
