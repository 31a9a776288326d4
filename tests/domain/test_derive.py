"""Tests for view derivation."""

from typing import Optional

import pytest

from modelviews.domain.derive import derive, view_name
from modelviews.domain.errors import DefinitionError
from modelviews.domain.patch import Patch
from modelviews.domain.policies import Mode
from modelviews.domain.schema import FieldSpec, ModelSchema
from modelviews.domain.shapes import ShapeRegistry


def _user_schema() -> ModelSchema:
    return ModelSchema(
        name="User",
        fields=(
            FieldSpec("id", int, get="required", create="forbidden", patch="forbidden"),
            FieldSpec("name", str, get="required", create="required", patch="patch"),
            FieldSpec("email", str, get="optional", create="optional", patch="optional"),
        ),
    )


class AuthorPatch:
    pass


class Author:
    pass


class TestUserScenario:
    def test_get_view(self, registry: ShapeRegistry) -> None:
        get = derive(_user_schema(), registry).get
        assert get is not None
        assert get.name == "UserGet"
        assert get.mode is Mode.GET
        assert get.field_names == ("id", "name", "email")
        assert get.field("id").shape is int
        assert get.field("name").shape is str
        assert get.field("email").shape == Optional[str]

    def test_create_view(self, registry: ShapeRegistry) -> None:
        create = derive(_user_schema(), registry).create
        assert create is not None
        assert create.name == "UserCreate"
        assert create.field_names == ("name", "email")
        assert create.field("name").shape is str
        assert create.field("email").shape == Optional[str]
        assert create.field("email").omit_when_absent
        assert not create.field("name").omit_when_absent

    def test_patch_view(self, registry: ShapeRegistry) -> None:
        patch = derive(_user_schema(), registry).patch
        assert patch is not None
        assert patch.name == "UserPatch"
        assert patch.field_names == ("name", "email")
        assert patch.field("name").shape == Patch[str]
        assert patch.field("email").shape == Patch[Optional[str]]
        assert "id" not in patch


class TestInclusion:
    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (Mode.GET, ("a", "c")),
            (Mode.CREATE, ("b", "c")),
            (Mode.PATCH, ("a", "b")),
        ],
    )
    def test_forbidden_excludes_and_order_is_kept(
        self, registry: ShapeRegistry, mode: Mode, expected: tuple[str, ...]
    ) -> None:
        schema = ModelSchema(
            name="M",
            fields=(
                FieldSpec("a", int, create="forbidden"),
                FieldSpec("b", int, get="forbidden"),
                FieldSpec("c", int, patch="forbidden"),
            ),
        )
        view = derive(schema, registry).for_mode(mode)
        assert view is not None
        assert view.field_names == expected

    def test_defaults_include_everywhere(self, registry: ShapeRegistry) -> None:
        derived = derive(ModelSchema(name="M", fields=(FieldSpec("x", int),)), registry)
        assert derived.modes() == (Mode.GET, Mode.CREATE, Mode.PATCH)
        assert derived.patch is not None
        assert derived.patch.field("x").shape == Patch[int]

    def test_all_patch_forbidden_produces_no_patch_view(self, registry: ShapeRegistry) -> None:
        schema = ModelSchema(
            name="Audit",
            fields=(
                FieldSpec("id", int, patch="forbidden"),
                FieldSpec("at", str, patch="forbidden"),
            ),
        )
        derived = derive(schema, registry)
        assert derived.patch is None
        assert derived.get is not None
        assert derived.modes() == (Mode.GET, Mode.CREATE)
        assert [view.name for view in derived] == ["AuditGet", "AuditCreate"]

    def test_empty_model_produces_no_views(self, registry: ShapeRegistry) -> None:
        derived = derive(ModelSchema(name="Empty"), registry)
        assert derived.modes() == ()


class TestNested:
    def test_optional_patch_of_nested_model(self, registry: ShapeRegistry) -> None:
        registry.register(Author, {Mode.GET: None, Mode.CREATE: None, Mode.PATCH: AuthorPatch})
        schema = ModelSchema(
            name="Post",
            fields=(
                FieldSpec(
                    "author", Author, get="forbidden", create="forbidden", patch="optional"
                ),
            ),
        )
        patch = derive(schema, registry).patch
        assert patch is not None
        assert patch.field("author").shape == Patch[Optional[AuthorPatch]]

    def test_nested_without_view_for_mode(self, registry: ShapeRegistry) -> None:
        registry.register(Author, {Mode.GET: None, Mode.CREATE: None, Mode.PATCH: AuthorPatch})
        schema = ModelSchema(name="Post", fields=(FieldSpec("author", Author),))
        with pytest.raises(DefinitionError) as excinfo:
            derive(schema, registry)
        assert excinfo.value.field == "author"
        assert excinfo.value.model == "Post"
        assert excinfo.value.mode == "get"

    def test_forbidden_mode_skips_resolution(self, registry: ShapeRegistry) -> None:
        registry.register(Author, {Mode.GET: None, Mode.CREATE: None, Mode.PATCH: AuthorPatch})
        schema = ModelSchema(
            name="Post",
            fields=(FieldSpec("author", Author, get="forbidden", create="forbidden"),),
        )
        derived = derive(schema, registry)
        assert derived.modes() == (Mode.PATCH,)


class TestErrors:
    def test_unknown_policy_token(self, registry: ShapeRegistry) -> None:
        schema = ModelSchema(name="M", fields=(FieldSpec("x", int, patch="sometimes"),))
        with pytest.raises(DefinitionError) as excinfo:
            derive(schema, registry)
        assert excinfo.value.field == "x"
        assert excinfo.value.token == "sometimes"

    def test_non_record_input(self, registry: ShapeRegistry) -> None:
        with pytest.raises(DefinitionError):
            derive(int | str, registry)  # type: ignore[arg-type]


class TestMemoization:
    def test_same_schema_same_result(self, registry: ShapeRegistry) -> None:
        schema = _user_schema()
        assert derive(schema, registry) is derive(schema, registry)

    def test_registry_change_invalidates(self, registry: ShapeRegistry) -> None:
        schema = ModelSchema(
            name="Post",
            fields=(FieldSpec("author", Author, get="forbidden", create="forbidden"),),
        )
        with pytest.raises(DefinitionError):
            derive(schema, registry)
        registry.register_view(Author, Mode.PATCH, AuthorPatch)
        derived = derive(schema, registry)
        assert derived.patch is not None


def test_view_name() -> None:
    assert view_name("User", Mode.CREATE) == "UserCreate"
