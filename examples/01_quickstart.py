#!/usr/bin/env python3
"""Example: Quickstart — scim-bulk

Build a bulk request that creates a user and a group containing that
user, validate it, and print its wire form.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install scim-bulk
"""
from __future__ import annotations

import scimbulk
from scimbulk import BulkOperation, BulkRequest, GenericScimResource


def main() -> None:
    print(f"scim-bulk version: {scimbulk.__version__}")

    user = GenericScimResource({
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:User"],
        "userName": "Alice",
    })
    group = GenericScimResource({
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:Group"],
        "displayName": "Tour Guides",
        "members": [{"type": "User", "value": "bulkId:qwerty"}],
    })

    # Step 1: Build the request; the group refers to the user by bulk id
    request = BulkRequest(failure_count=1).append(
        BulkOperation.post("/Users", user).with_bulk_id("qwerty"),
        BulkOperation.post("/Groups", group).with_bulk_id("ytrewq"),
        BulkOperation.delete("/Users/b7c14771", "b7c14771").with_version('W/"0ee8add0"'),
    )
    print(f"Operations: {len(request)}, failureCount={request.failure_count}")

    # Step 2: Validate ordering and references
    diagnostics = scimbulk.validate(request)
    print(f"Validation: {len(diagnostics)} finding(s)")
    for diag in diagnostics:
        print(f"  {diag}")

    # Step 3: Wire form
    print(scimbulk.dumps(request))


if __name__ == "__main__":
    main()
