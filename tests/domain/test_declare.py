"""Tests for introspecting model classes into ModelSchema."""

import dataclasses
import enum
from typing import Annotated, TypedDict

import pytest
from pydantic import BaseModel, Field

from modelviews.domain.declare import ViewPolicy, policy, schema_from_model, split_annotated
from modelviews.domain.errors import DefinitionError
from modelviews.domain.policies import CreatePolicy, GetPolicy, PatchPolicy


class User(BaseModel):
    id: Annotated[int, policy(create="forbidden", patch="forbidden")]
    name: str
    email: Annotated[
        str | None, policy(get="optional", create="optional", patch="optional")
    ] = None
    age: Annotated[int, Field(ge=0)] = 0


@dataclasses.dataclass
class Point:
    x: Annotated[float, policy(patch="forbidden")]
    y: float


class Row(TypedDict):
    key: Annotated[str, policy(create="forbidden")]
    value: int


class Kind(enum.Enum):
    A = "a"


class TestPydanticModels:
    def test_fields_in_declaration_order(self) -> None:
        schema = schema_from_model(User)
        assert schema.name == "User"
        assert schema.field_names == ("id", "name", "email", "age")
        assert schema.model is User

    def test_policies(self) -> None:
        fields = {f.name: f for f in schema_from_model(User).fields}
        assert fields["id"].get is GetPolicy.REQUIRED
        assert fields["id"].create is CreatePolicy.FORBIDDEN
        assert fields["id"].patch is PatchPolicy.FORBIDDEN
        assert fields["name"].create is CreatePolicy.REQUIRED
        assert fields["name"].patch is PatchPolicy.PATCH
        assert fields["email"].patch is PatchPolicy.OPTIONAL

    def test_policy_marker_removed_from_type(self) -> None:
        fields = {f.name: f for f in schema_from_model(User).fields}
        assert fields["id"].type is int
        assert fields["email"].type == str | None

    def test_other_metadata_kept(self) -> None:
        fields = {f.name: f for f in schema_from_model(User).fields}
        inner, metadata = split_annotated(fields["age"].type)
        assert inner is int
        assert metadata

    def test_model_flags(self) -> None:
        schema = schema_from_model(User, wire=True, core_module="vendor.mv")
        assert schema.wire is True
        assert schema.core_module == "vendor.mv"

    def test_unknown_token_names_field(self) -> None:
        class Bad(BaseModel):
            name: Annotated[str, policy(create="sometimes")]

        with pytest.raises(DefinitionError) as excinfo:
            schema_from_model(Bad)
        assert excinfo.value.field == "name"
        assert excinfo.value.model == "Bad"
        assert excinfo.value.mode == "create"

    def test_duplicate_markers(self) -> None:
        class Twice(BaseModel):
            name: Annotated[str, policy(get="optional"), policy(patch="forbidden")]

        with pytest.raises(DefinitionError):
            schema_from_model(Twice)


class TestOtherRecords:
    def test_dataclass(self) -> None:
        schema = schema_from_model(Point)
        assert schema.field_names == ("x", "y")
        assert schema.fields[0].patch is PatchPolicy.FORBIDDEN
        assert schema.fields[0].type is float

    def test_typeddict(self) -> None:
        schema = schema_from_model(Row)
        assert schema.field_names == ("key", "value")
        assert schema.fields[0].create is CreatePolicy.FORBIDDEN


class TestNonRecords:
    @pytest.mark.parametrize("target", [Kind, int, int | str, object(), "User"])
    def test_rejected(self, target: object) -> None:
        with pytest.raises(DefinitionError):
            schema_from_model(target)


def test_policy_builds_marker() -> None:
    assert policy(get="optional") == ViewPolicy(get="optional")
    assert policy() == ViewPolicy()
