"""Unit tests for scimbulk.bulk.operation — factories, identity handling,
derived copies, and rendering.
"""
from __future__ import annotations

import json

import pytest

from scimbulk.bulk.operation import BulkMethod, BulkOperation, BulkRef, ExternalId
from scimbulk.errors import InvalidArgumentError, InvalidStateError, ScimBulkError
from scimbulk.resources import GenericScimResource

_PAYLOAD = GenericScimResource({"userName": "bjensen"})


# ---------------------------------------------------------------------------
# BulkMethod
# ---------------------------------------------------------------------------


class TestBulkMethod:
    @pytest.mark.parametrize("name", ["POST", "PUT", "PATCH", "DELETE"])
    def test_method_exists(self, name: str) -> None:
        assert BulkMethod[name].value == name

    def test_get_is_not_a_bulk_method(self) -> None:
        assert "GET" not in BulkMethod.__members__

    def test_parse_is_case_insensitive(self) -> None:
        assert BulkMethod.parse("patch") is BulkMethod.PATCH

    def test_parse_passes_members_through(self) -> None:
        assert BulkMethod.parse(BulkMethod.PUT) is BulkMethod.PUT

    def test_parse_rejects_get(self) -> None:
        with pytest.raises(InvalidArgumentError, match="GET"):
            BulkMethod.parse("GET")


# ---------------------------------------------------------------------------
# Identity types
# ---------------------------------------------------------------------------


class TestIdentity:
    def test_bulk_ref_strips_prefix(self) -> None:
        assert BulkRef("bulkId:qwerty").token == "qwerty"

    def test_bulk_ref_reference_form(self) -> None:
        assert BulkRef("qwerty").reference == "bulkId:qwerty"

    def test_bulk_ref_rejects_empty_token(self) -> None:
        with pytest.raises(InvalidArgumentError):
            BulkRef("bulkId:")

    def test_external_id_rejects_empty(self) -> None:
        with pytest.raises(InvalidArgumentError):
            ExternalId("")

    def test_identities_are_values(self) -> None:
        assert BulkRef("a") == BulkRef("bulkId:a")
        assert ExternalId("a") != BulkRef("a")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


class TestPost:
    def test_post_fields(self) -> None:
        op = BulkOperation.post("/Users", _PAYLOAD)
        assert op.method is BulkMethod.POST
        assert op.path == "/Users"
        assert op.data == _PAYLOAD
        assert op.identity is None
        assert op.effective_id is None

    def test_post_requires_payload(self) -> None:
        with pytest.raises(InvalidArgumentError, match="'data' field should not be null"):
            BulkOperation.post("/Users", None)

    def test_post_rejects_external_id(self) -> None:
        with pytest.raises(InvalidArgumentError):
            BulkOperation(BulkMethod.POST, "/Users", identity=ExternalId("42"), data=_PAYLOAD)

    def test_empty_path_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError, match="path"):
            BulkOperation.post("", _PAYLOAD)

    def test_errors_share_a_base_class(self) -> None:
        with pytest.raises(ScimBulkError):
            BulkOperation.post("/Users", None)

    def test_errors_are_value_errors(self) -> None:
        with pytest.raises(ValueError):
            BulkOperation.post("/Users", None)


class TestPutAndPatch:
    @pytest.mark.parametrize("factory", [BulkOperation.put, BulkOperation.patch])
    def test_id_becomes_external_id(self, factory) -> None:
        op = factory("/Users/42", "42", _PAYLOAD)
        assert op.identity == ExternalId("42")
        assert op.external_id == "42"
        assert op.effective_id == "42"
        assert op.bulk_id is None

    @pytest.mark.parametrize("factory", [BulkOperation.put, BulkOperation.patch])
    def test_payload_required(self, factory) -> None:
        with pytest.raises(InvalidArgumentError):
            factory("/Users/42", "42", None)

    @pytest.mark.parametrize("factory", [BulkOperation.put, BulkOperation.patch])
    def test_id_required(self, factory) -> None:
        with pytest.raises(InvalidArgumentError, match="'id' field"):
            factory("/Users/42", None, _PAYLOAD)

    def test_methods(self) -> None:
        assert BulkOperation.put("/Users/1", "1", _PAYLOAD).method is BulkMethod.PUT
        assert BulkOperation.patch("/Users/1", "1", _PAYLOAD).method is BulkMethod.PATCH

    def test_constructor_enforces_identity(self) -> None:
        with pytest.raises(InvalidArgumentError):
            BulkOperation(BulkMethod.PUT, "/Users/1", data=_PAYLOAD)


class TestDelete:
    def test_delete_without_id(self) -> None:
        op = BulkOperation.delete("/Users/resource")
        assert op.method is BulkMethod.DELETE
        assert op.data is None
        assert op.effective_id is None

    def test_delete_with_id(self) -> None:
        op = BulkOperation.delete("/Users/resource", "resource")
        assert op.identity == ExternalId("resource")

    def test_delete_factory_takes_no_payload(self) -> None:
        with pytest.raises(TypeError):
            BulkOperation.delete("/Users/resource", "resource", _PAYLOAD)  # type: ignore[call-arg]

    def test_constructor_rejects_payload(self) -> None:
        with pytest.raises(InvalidArgumentError, match="DELETE"):
            BulkOperation(BulkMethod.DELETE, "/Users/1", identity=ExternalId("1"), data=_PAYLOAD)


# ---------------------------------------------------------------------------
# Derived copies
# ---------------------------------------------------------------------------


class TestWithBulkId:
    def test_none_is_a_no_op(self) -> None:
        op = BulkOperation.put("/Users/42", "42", _PAYLOAD)
        assert op.with_bulk_id(None) is op
        assert op.effective_id == "42"

    def test_sets_bulk_reference(self) -> None:
        op = BulkOperation.post("/Users", _PAYLOAD).with_bulk_id("qwerty")
        assert op.bulk_id == "qwerty"
        assert op.effective_id == "bulkId:qwerty"
        assert op.identity == BulkRef("qwerty")

    def test_clears_external_id(self) -> None:
        op = BulkOperation.put("/Users/42", "42", _PAYLOAD).with_bulk_id("qwerty")
        assert op.external_id is None
        assert op.bulk_id == "qwerty"

    def test_does_not_modify_original(self) -> None:
        original = BulkOperation.post("/Users", _PAYLOAD)
        original.with_bulk_id("qwerty")
        assert original.bulk_id is None

    def test_prefixed_token_is_not_doubled(self) -> None:
        op = BulkOperation.post("/Users", _PAYLOAD).with_bulk_id("bulkId:qwerty")
        assert op.effective_id == "bulkId:qwerty"

    def test_none_keeps_existing_bulk_id(self) -> None:
        op = BulkOperation.post("/Users", _PAYLOAD).with_bulk_id("qwerty")
        assert op.with_bulk_id(None).bulk_id == "qwerty"


class TestAsBulkId:
    def test_put_id_becomes_bulk_reference(self) -> None:
        op = BulkOperation.put("/Users", "42", _PAYLOAD).as_bulk_id()
        assert op.effective_id == "bulkId:42"
        assert op.bulk_id == "42"
        assert op.external_id is None

    @pytest.mark.parametrize("op", [
        BulkOperation.delete("/Users/resource", "resource"),
        BulkOperation.patch("/Users/resource", "resource", _PAYLOAD),
    ])
    def test_other_methods(self, op: BulkOperation) -> None:
        assert op.as_bulk_id().bulk_id == "resource"

    def test_prefixed_id_is_stripped(self) -> None:
        op = BulkOperation.delete("/Users/x", "bulkId:qwerty").as_bulk_id()
        assert op.bulk_id == "qwerty"

    def test_without_external_id_fails(self) -> None:
        with pytest.raises(InvalidStateError):
            BulkOperation.post("/Users", _PAYLOAD).as_bulk_id()

    def test_second_call_fails(self) -> None:
        op = BulkOperation.put("/Users", "42", _PAYLOAD).as_bulk_id()
        with pytest.raises(InvalidStateError):
            op.as_bulk_id()

    def test_delete_without_id_fails(self) -> None:
        with pytest.raises(InvalidStateError):
            BulkOperation.delete("/Users").as_bulk_id()


class TestWithVersion:
    def test_sets_version(self) -> None:
        op = BulkOperation.delete("/Users/1", "1").with_version('W/"3694e05e"')
        assert op.version == 'W/"3694e05e"'

    def test_none_clears_version(self) -> None:
        op = BulkOperation.delete("/Users/1", "1").with_version("v1").with_version(None)
        assert op.version is None

    def test_keeps_identity(self) -> None:
        op = BulkOperation.put("/Users/1", "1", _PAYLOAD).with_version("v1")
        assert op.external_id == "1"


# ---------------------------------------------------------------------------
# Value semantics and rendering
# ---------------------------------------------------------------------------


class TestValueSemantics:
    def test_frozen(self) -> None:
        op = BulkOperation.delete("/Users/1", "1")
        with pytest.raises((AttributeError, TypeError)):
            op.path = "/Groups"  # type: ignore[misc]

    def test_equal_operations(self) -> None:
        a = BulkOperation.post("/Users", {"userName": "a"}).with_bulk_id("q")
        b = BulkOperation.post("/Users", {"userName": "a"}).with_bulk_id("q")
        assert a == b

    def test_hash_ignores_payload(self) -> None:
        a = BulkOperation.post("/Users", {"userName": "a"})
        assert hash(a) == hash(BulkOperation.post("/Users", {"userName": "b"}))

    def test_dict_payload_is_hashable(self) -> None:
        assert {BulkOperation.post("/Users", {"userName": "a"})}

    def test_dict_payload_is_copied(self) -> None:
        body = {"userName": "bjensen", "emails": [{"value": "b@example.com"}]}
        op = BulkOperation.post("/Users", body)
        before = str(op)
        body["userName"] = "mallory"
        body["emails"][0]["value"] = "m@example.com"
        assert str(op) == before
        assert isinstance(op.data, GenericScimResource)
        assert op.data.get("userName") == "bjensen"


class TestRendering:
    def test_str_is_wire_json(self) -> None:
        op = BulkOperation.post("/Users", _PAYLOAD).with_bulk_id("qwerty")
        rendered = json.loads(str(op))
        assert rendered == {
            "method": "POST",
            "path": "/Users",
            "bulkId": "qwerty",
            "data": {"userName": "bjensen"},
        }

    def test_external_id_never_rendered(self) -> None:
        op = BulkOperation.put("/Users/secret-id", "secret-id", _PAYLOAD)
        rendered = json.loads(str(op))
        assert "id" not in rendered
        assert "bulkId" not in rendered

    def test_rendering_does_not_change_identity(self) -> None:
        op = BulkOperation.put("/Users/42", "42", _PAYLOAD)
        str(op)
        repr(op)
        assert op.external_id == "42"

    def test_repr_names_class(self) -> None:
        assert repr(BulkOperation.delete("/Users/1", "1")).startswith("BulkOperation(")
