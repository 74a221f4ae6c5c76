"""Shared test fixtures for scim-bulk.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from typing import Any

import pytest

from scimbulk.resources import GenericScimResource


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "scimbulk"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def user_payload() -> GenericScimResource:
    """A minimal core User resource."""
    return GenericScimResource({
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:User"],
        "userName": "Alice",
    })


@pytest.fixture()
def group_payload_factory() -> Any:
    """Build a Group whose single member is ``member_value``."""

    def _make(member_value: str) -> GenericScimResource:
        return GenericScimResource({
            "schemas": ["urn:ietf:params:scim:schemas:core:2.0:Group"],
            "displayName": "Tour Guides",
            "members": [{"type": "User", "value": member_value}],
        })

    return _make
