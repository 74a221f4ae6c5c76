"""Unit tests for scimbulk.filters.evaluator."""
from __future__ import annotations

from typing import Any

import pytest

from scimbulk.filters import (
    FilterEvaluator,
    and_,
    co,
    eq,
    evaluate,
    ew,
    ge,
    gt,
    le,
    lt,
    ne,
    not_,
    or_,
    pr,
    sw,
)
from scimbulk.resources import GenericScimResource

_ENTERPRISE = "urn:ietf:params:scim:schemas:extension:enterprise:2.0:User"


@pytest.fixture()
def user() -> dict[str, Any]:
    return {
        "schemas": ["urn:ietf:params:scim:schemas:core:2.0:User", _ENTERPRISE],
        "userName": "BJensen",
        "name": {"familyName": "Jensen", "givenName": "Barbara"},
        "title": "",
        "active": True,
        "loginCount": 12,
        "emails": [
            {"value": "bjensen@example.com", "type": "work"},
            {"value": "babs@jensen.org", "type": "home"},
        ],
        "meta": {"created": "2011-08-01T18:29:49Z"},
        _ENTERPRISE: {"employeeNumber": "701984"},
    }


@pytest.fixture()
def ev() -> FilterEvaluator:
    return FilterEvaluator()


class TestEquality:
    def test_case_insensitive_value(self, ev, user) -> None:
        assert ev.matches(eq("userName", "bjensen"), user)

    def test_case_exact(self, user) -> None:
        assert not FilterEvaluator(case_exact=True).matches(eq("userName", "bjensen"), user)

    def test_case_insensitive_attribute_name(self, ev, user) -> None:
        assert ev.matches(eq("USERNAME", "BJensen"), user)

    def test_sub_attribute(self, ev, user) -> None:
        assert ev.matches(eq("name.familyName", "jensen"), user)

    def test_multi_valued_any(self, ev, user) -> None:
        assert ev.matches(eq("emails", "babs@jensen.org"), user)

    def test_multi_valued_sub_attribute(self, ev, user) -> None:
        assert ev.matches(eq("emails.type", "home"), user)

    def test_boolean(self, ev, user) -> None:
        assert ev.matches(eq("active", True), user)
        assert not ev.matches(eq("loginCount", True), user)

    def test_null_matches_absent(self, ev, user) -> None:
        assert ev.matches(eq("nickName", None), user)
        assert ev.matches(eq("title", None), user)
        assert not ev.matches(eq("userName", None), user)

    def test_not_equal(self, ev, user) -> None:
        assert ev.matches(ne("userName", "someone"), user)
        assert not ev.matches(ne("userName", "bjensen"), user)

    def test_extension_attribute(self, ev, user) -> None:
        assert ev.matches(eq(f"{_ENTERPRISE}:employeeNumber", "701984"), user)


class TestSubstring:
    def test_contains(self, ev, user) -> None:
        assert ev.matches(co("emails", "example.com"), user)

    def test_starts_with(self, ev, user) -> None:
        assert ev.matches(sw("userName", "bj"), user)

    def test_ends_with(self, ev, user) -> None:
        assert ev.matches(ew("name.givenName", "ARA"), user)

    def test_non_string_attribute(self, ev, user) -> None:
        assert not ev.matches(co("loginCount", "1"), user)


class TestOrdering:
    def test_date_strings(self, ev, user) -> None:
        assert ev.matches(gt("meta.created", "2011-05-13T04:42:34Z"), user)
        assert not ev.matches(lt("meta.created", "2011-05-13T04:42:34Z"), user)

    def test_numbers(self, ev, user) -> None:
        assert ev.matches(ge("loginCount", 12), user)
        assert ev.matches(le("loginCount", 12.0), user)
        assert not ev.matches(gt("loginCount", 12), user)

    def test_mixed_types_do_not_match(self, ev, user) -> None:
        assert not ev.matches(gt("loginCount", "1"), user)
        assert not ev.matches(lt("userName", 5), user)

    def test_boolean_attribute_is_not_ordered(self, ev, user) -> None:
        assert not ev.matches(ge("active", 0), user)

    def test_missing_attribute(self, ev, user) -> None:
        assert not ev.matches(gt("meta.lastModified", "2000"), user)


class TestPresenceAndLogic:
    def test_present(self, ev, user) -> None:
        assert ev.matches(pr("emails"), user)

    def test_empty_string_is_not_present(self, ev, user) -> None:
        assert not ev.matches(pr("title"), user)

    def test_absent(self, ev, user) -> None:
        assert not ev.matches(pr("nickName"), user)

    def test_and_or_not(self, ev, user) -> None:
        node = and_(
            eq("active", True),
            or_(eq("emails.type", "work"), pr("phoneNumbers")),
            not_(eq("userName", "admin")),
        )
        assert ev.matches(node, user)

    def test_and_fails_on_one_operand(self, ev, user) -> None:
        assert not ev.matches(and_(eq("active", True), pr("nickName")), user)


class TestInputs:
    def test_resource_object(self, user) -> None:
        assert evaluate(eq("userName", "bjensen"), GenericScimResource(user))

    def test_evaluate_case_exact(self, user) -> None:
        assert not evaluate(eq("userName", "bjensen"), user, case_exact=True)
