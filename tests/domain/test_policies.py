"""Tests for view modes and policy parsing."""

import pytest

from modelviews.domain.errors import DefinitionError
from modelviews.domain.policies import (
    CreatePolicy,
    GetPolicy,
    Mode,
    PatchPolicy,
    is_forbidden,
    parse_policy,
)


class TestMode:
    def test_members(self) -> None:
        assert [m.value for m in Mode] == ["get", "create", "patch"]

    def test_suffix(self) -> None:
        assert Mode.GET.suffix == "Get"
        assert Mode.CREATE.suffix == "Create"
        assert Mode.PATCH.suffix == "Patch"


class TestParsePolicy:
    def test_defaults(self) -> None:
        assert parse_policy(Mode.GET, None) is GetPolicy.REQUIRED
        assert parse_policy(Mode.CREATE, None) is CreatePolicy.REQUIRED
        assert parse_policy(Mode.PATCH, None) is PatchPolicy.PATCH

    def test_tokens(self) -> None:
        assert parse_policy("get", "optional") is GetPolicy.OPTIONAL
        assert parse_policy("create", "forbidden") is CreatePolicy.FORBIDDEN
        assert parse_policy("patch", "optional") is PatchPolicy.OPTIONAL

    def test_enum_member_passes_through(self) -> None:
        assert parse_policy(Mode.PATCH, PatchPolicy.FORBIDDEN) is PatchPolicy.FORBIDDEN

    def test_unknown_token(self) -> None:
        with pytest.raises(DefinitionError) as excinfo:
            parse_policy(Mode.GET, "sometimes", field="email", model="User")
        err = excinfo.value
        assert err.field == "email"
        assert err.model == "User"
        assert err.mode == "get"
        assert err.token == "sometimes"
        assert "sometimes" in str(err)
        assert "email" in str(err)

    def test_patch_token_rejected_for_get(self) -> None:
        with pytest.raises(DefinitionError):
            parse_policy(Mode.GET, "patch", field="name")

    def test_member_of_other_mode_rejected(self) -> None:
        with pytest.raises(DefinitionError):
            parse_policy(Mode.CREATE, PatchPolicy.PATCH, field="name")

    def test_non_string_rejected(self) -> None:
        with pytest.raises(DefinitionError):
            parse_policy(Mode.CREATE, True, field="name")


class TestIsForbidden:
    def test_forbidden_in_every_mode(self) -> None:
        assert is_forbidden(GetPolicy.FORBIDDEN)
        assert is_forbidden(CreatePolicy.FORBIDDEN)
        assert is_forbidden(PatchPolicy.FORBIDDEN)
        assert not is_forbidden(PatchPolicy.OPTIONAL)
        assert not is_forbidden(GetPolicy.REQUIRED)


class TestDefinitionError:
    def test_is_value_error(self) -> None:
        assert issubclass(DefinitionError, ValueError)

    def test_to_detail_skips_missing(self) -> None:
        err = DefinitionError("bad", model="User", token="x")
        assert err.to_detail() == {"model": "User", "token": "x"}
