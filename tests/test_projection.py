"""
Tests for input and output projection.

Core principle: a negative decision shapes the payload to nothing, it never
raises.
"""

import types
import uuid
from datetime import datetime, timezone

import pytest
from pydantic import BaseModel

from featureguard import Capability, ContractViolation, filter_input, filter_output
from featureguard.policy import POLICY


# =============================================================================
# Fixtures
# =============================================================================


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def session():
    return {
        "id": "s1",
        "user_id": "u1",
        "token": "t",
        "expires_at": NOW,
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def user():
    return {
        "id": "u1",
        "username": "alice",
        "email": "alice@example.com",
        "password": "hash",
        "features": ["read:user"],
        "created_at": NOW,
        "updated_at": NOW,
    }


@pytest.fixture
def content():
    return {
        "id": "c1",
        "owner_id": "u1",
        "parent_id": None,
        "slug": "hello",
        "title": "Hello",
        "body": "World",
        "status": "published",
        "source_url": None,
        "created_at": NOW,
        "updated_at": NOW,
        "published_at": NOW,
        "deleted_at": None,
        "internal_score": 42,
    }


# =============================================================================
# filter_input
# =============================================================================


class TestFilterInput:
    def test_extra_fields_dropped(self, principal_factory):
        principal = principal_factory("create:content:text_root")
        result = filter_input(
            principal,
            "create:content:text_root",
            {"slug": "a", "title": "b", "body": "c", "extra": "drop-me"},
        )
        assert result == {"slug": "a", "title": "b", "body": "c"}

    def test_absent_fields_not_added(self, principal_factory):
        principal = principal_factory("update:user")
        assert filter_input(principal, "update:user", {"username": "bob"}) == {"username": "bob"}

    def test_none_is_a_value(self, principal_factory):
        principal = principal_factory("update:content")
        result = filter_input(principal, "update:content", {"parent_id": None, "title": "x"})
        assert result == {"parent_id": None, "title": "x"}

    def test_values_copied_verbatim(self, principal_factory):
        principal = principal_factory("create:session")
        result = filter_input(principal, "create:session", {"email": " A@B.C ", "password": 123})
        assert result == {"email": " A@B.C ", "password": 123}

    def test_renamed_field(self, principal_factory):
        principal = principal_factory("read:activation_token")
        result = filter_input(principal, "read:activation_token", {"token_id": "abc", "id": "x"})
        assert result == {"tokenId": "abc"}

    def test_capability_not_held(self, nobody):
        assert filter_input(nobody, "create:user", {"username": "bob"}) == {}

    def test_capability_without_input_rule(self, principal_factory):
        principal = principal_factory("read:user")
        assert filter_input(principal, "read:user", {"username": "bob"}) == {}

    def test_update_user_ignores_ownership(self, principal_factory):
        # No resource is involved in shaping; membership decides
        principal = principal_factory("update:user", id="u1")
        assert filter_input(principal, "update:user", {"id": "u2", "email": "e"}) == {"email": "e"}

    def test_object_input(self, principal_factory):
        principal = principal_factory("create:user")
        body = types.SimpleNamespace(username="bob", email="b@x.io", is_admin=True)
        assert filter_input(principal, "create:user", body) == {"username": "bob", "email": "b@x.io"}

    def test_input_not_mutated(self, principal_factory):
        principal = principal_factory("create:user")
        body = {"username": "bob", "role": "admin"}
        filter_input(principal, "create:user", body)
        assert body == {"username": "bob", "role": "admin"}

    def test_missing_input(self, principal_factory):
        with pytest.raises(ContractViolation):
            filter_input(principal_factory("create:user"), "create:user", None)

    def test_empty_input_is_valid(self, principal_factory):
        assert filter_input(principal_factory("create:user"), "create:user", {}) == {}

    @pytest.mark.parametrize(
        "capability, allowed",
        [
            ("create:session", {"email", "password"}),
            ("create:user", {"username", "email", "password"}),
            ("update:user", {"username", "email", "password"}),
            ("read:activation_token", {"tokenId"}),
            ("create:content:text_root", {"slug", "title", "body", "status", "source_url"}),
            (
                "create:content:text_child",
                {"parent_id", "slug", "title", "body", "status", "source_url"},
            ),
            ("update:content", {"parent_id", "slug", "title", "body", "status", "source_url"}),
        ],
    )
    def test_allow_lists(self, capability, allowed, principal_factory):
        body = {
            "username": "u",
            "email": "e",
            "password": "p",
            "token_id": "t",
            "parent_id": "c0",
            "slug": "s",
            "title": "t",
            "body": "b",
            "status": "draft",
            "source_url": "https://example.com",
            "id": "x",
            "owner_id": "u9",
            "is_admin": True,
        }
        result = filter_input(principal_factory(capability), capability, body)
        assert set(result) == allowed

    @pytest.mark.parametrize(
        "capability",
        [c for c in Capability if POLICY[c].input is None],
    )
    def test_capabilities_accepting_no_input(self, capability, principal_factory):
        assert filter_input(principal_factory(*Capability), capability, {"slug": "s"}) == {}

    def test_keys_limited_to_those_sent(self, principal_factory):
        principal = principal_factory("create:content:text_child")
        body = {"parent_id": "c0", "title": "t", "owner_id": "u9"}
        assert set(filter_input(principal, "create:content:text_child", body)) == {"parent_id", "title"}


# =============================================================================
# filter_output: identity checked
# =============================================================================


class TestSessionOutput:
    def test_capability_not_held_despite_identity(self, nobody, session):
        assert filter_output(nobody, "read:session", session) == {}

    def test_read_session(self, principal_factory, session):
        result = filter_output(principal_factory("read:session"), "read:session", session)
        assert result == {
            "id": "s1",
            "expires_at": NOW,
            "created_at": NOW,
            "updated_at": NOW,
        }

    def test_create_session_exposes_token(self, principal_factory, session):
        result = filter_output(principal_factory("create:session"), "create:session", session)
        assert result["token"] == "t"
        assert "user_id" not in result

    def test_other_users_session(self, principal_factory, session):
        principal = principal_factory("read:session", id="u2")
        assert filter_output(principal, "read:session", session) == {}

    def test_session_without_user_id(self, principal_factory, session):
        del session["user_id"]
        assert filter_output(principal_factory("read:session"), "read:session", session) == {}

    def test_principal_without_id(self, principal_factory, session):
        session["user_id"] = None
        principal = principal_factory("read:session", id=None)
        assert filter_output(principal, "read:session", session) == {}


class TestUserOutput:
    def test_public_profile(self, nobody, user):
        result = filter_output(nobody, "read:user", user)
        assert result == {
            "id": "u1",
            "username": "alice",
            "features": ["read:user"],
            "created_at": NOW,
            "updated_at": NOW,
        }

    def test_self_profile_adds_email(self, principal_factory, user):
        result = filter_output(principal_factory("read:user:self"), "read:user:self", user)
        assert set(result) == {"id", "username", "email", "features", "created_at", "updated_at"}
        assert result["email"] == "alice@example.com"

    def test_self_profile_of_someone_else(self, principal_factory, user):
        principal = principal_factory("read:user:self", id="u2")
        assert filter_output(principal, "read:user:self", user) == {}

    def test_self_profile_without_capability(self, nobody, user):
        assert filter_output(nobody, "read:user:self", user) == {}

    def test_list_keeps_length_and_order(self, nobody, user):
        users = [dict(user, id=f"u{i}", username=f"user{i}") for i in range(5)]
        result = filter_output(nobody, "read:user:list", users)

        assert [u["id"] for u in result] == ["u0", "u1", "u2", "u3", "u4"]
        for item in result:
            assert set(item) == {"id", "username", "features", "created_at", "updated_at"}

    def test_empty_list(self, nobody):
        assert filter_output(nobody, "read:user:list", []) == []

    def test_list_requires_sequence(self, nobody, user):
        with pytest.raises(ContractViolation):
            filter_output(nobody, "read:user:list", 42)

    def test_list_of_objects(self, nobody):
        users = [types.SimpleNamespace(id="u1", username="a", email="x")]
        assert filter_output(nobody, "read:user:list", users) == [{"id": "u1", "username": "a"}]

    def test_single_record_given_to_list_rule(self, nobody, user):
        with pytest.raises(ContractViolation) as exc:
            filter_output(nobody, "read:user:list", user)
        assert exc.value.context == {"capability": "read:user:list", "type": "dict"}

    def test_model_given_to_list_rule(self, nobody):
        class UserRow(BaseModel):
            id: str
            username: str

        with pytest.raises(ContractViolation):
            filter_output(nobody, "read:user:list", UserRow(id="u1", username="alice"))

    def test_string_given_to_content_list(self, nobody):
        with pytest.raises(ContractViolation):
            filter_output(nobody, "read:content:list", "c1")

    def test_generator_of_records(self, nobody, user):
        result = filter_output(nobody, "read:user:list", (dict(user) for _ in range(2)))
        assert len(result) == 2


class TestMiscOutput:
    def test_activation_token(self, nobody):
        token = {"id": "t1", "user_id": "u1", "used": False, "expires_at": NOW}
        assert filter_output(nobody, "read:activation_token", token) == {
            "id": "t1",
            "used": False,
            "expires_at": NOW,
        }

    def test_capability_without_output_rule(self, principal_factory, user):
        assert filter_output(principal_factory("create:user"), "create:user", user) == {}

    def test_missing_output(self, nobody):
        with pytest.raises(ContractViolation):
            filter_output(nobody, "read:user", None)


# =============================================================================
# filter_output: delegated to the content schema
# =============================================================================


class TestContentOutput:
    def test_unknown_keys_dropped(self, nobody, content):
        result = filter_output(nobody, "read:content", content)
        assert "internal_score" not in result
        assert result["slug"] == "hello"
        assert result["status"] == "published"
        assert result["parent_id"] is None

    def test_absent_fields_stay_absent(self, nobody, content):
        del content["published_at"]
        assert "published_at" not in filter_output(nobody, "read:content", content)

    def test_invalid_content(self, nobody, content):
        content["status"] = "secret"
        with pytest.raises(ContractViolation) as exc:
            filter_output(nobody, "read:content", content)
        assert exc.value.context["errors"]

    def test_content_list(self, nobody, content):
        contents = [dict(content, id="c1"), dict(content, id="c2")]
        result = filter_output(nobody, "read:content:list", contents)
        assert [c["id"] for c in result] == ["c1", "c2"]
        assert all("internal_score" not in c for c in result)

    def test_uuid_ids(self, nobody, content):
        content_id, owner_id, parent_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        row = dict(content, id=content_id, owner_id=owner_id, parent_id=parent_id)

        result = filter_output(nobody, "read:content", row)
        assert result["id"] == str(content_id)
        assert result["owner_id"] == str(owner_id)
        assert result["parent_id"] == str(parent_id)

    def test_uuid_ids_in_list(self, nobody, content):
        rows = [dict(content, id=uuid.uuid4(), owner_id=uuid.uuid4()) for _ in range(3)]
        assert len(filter_output(nobody, "read:content:list", rows)) == 3


# =============================================================================
# Contract violations are logged
# =============================================================================


class TestViolationLogging:
    def test_invalid_content_logged(self, nobody, content, caplog):
        content["status"] = "secret"
        with caplog.at_level("WARNING", logger="featureguard.guard"):
            with pytest.raises(ContractViolation) as exc:
                filter_output(nobody, "read:content", content)
        assert exc.value.error_id in caplog.text

    def test_wrong_list_shape_logged(self, nobody, caplog):
        with caplog.at_level("WARNING", logger="featureguard.guard"):
            with pytest.raises(ContractViolation) as exc:
                filter_output(nobody, "read:user:list", {"id": "u1"})
        assert exc.value.error_id in caplog.text
