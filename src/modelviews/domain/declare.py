"""Declaration surface — policies attached to model fields.

Policies ride along in ``Annotated`` metadata::

    class User(BaseModel):
        id: Annotated[int, policy(create="forbidden", patch="forbidden")]
        name: str
        email: Annotated[str, policy(get="optional", create="optional", patch="optional")]

Fields without a marker take the defaults (get=required, create=required,
patch=patch). :func:`schema_from_model` turns a pydantic model, dataclass or
TypedDict into a :class:`~modelviews.domain.schema.ModelSchema`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin, get_type_hints, is_typeddict

from pydantic import BaseModel

from modelviews.domain.errors import DefinitionError
from modelviews.domain.policies import Mode, parse_policy
from modelviews.domain.schema import DEFAULT_CORE_MODULE, FieldSpec, ModelSchema


@dataclass(frozen=True)
class ViewPolicy:
    """Per-field policy marker. ``None`` means "use the mode's default"."""

    get: object = None
    create: object = None
    patch: object = None


def policy(*, get: object = None, create: object = None, patch: object = None) -> ViewPolicy:
    """Build a :class:`ViewPolicy` marker for use inside ``Annotated[...]``."""
    return ViewPolicy(get=get, create=create, patch=patch)


def schema_from_model(
    cls: Any,
    *,
    wire: bool = False,
    core_module: str | None = None,
) -> ModelSchema:
    """Introspect *cls* into a ModelSchema, keeping field declaration order.

    Raises:
        DefinitionError: If *cls* is not a flat record type (pydantic model,
            dataclass or TypedDict), or a field carries an unknown policy.
    """
    name = getattr(cls, "__name__", repr(cls))
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        raw_fields = _pydantic_fields(cls)
    elif isinstance(cls, type) and dataclasses.is_dataclass(cls):
        raw_fields = _dataclass_fields(cls)
    elif is_typeddict(cls):
        raw_fields = _annotated_fields(cls, list(get_type_hints(cls, include_extras=True)))
    else:
        msg = (
            f"views can only be declared on a record of named fields "
            f"(pydantic model, dataclass or TypedDict), got {name}"
        )
        raise DefinitionError(msg, model=name)

    specs = tuple(
        _field_spec(name, field_name, field_type, metadata)
        for field_name, field_type, metadata in raw_fields
    )
    return ModelSchema(
        name=name,
        fields=specs,
        wire=wire,
        core_module=core_module or DEFAULT_CORE_MODULE,
        model=cls,
    )


def split_annotated(tp: Any) -> tuple[Any, list[Any]]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``; other types pass through."""
    if get_origin(tp) is Annotated:
        inner, *metadata = get_args(tp)
        return inner, metadata
    return tp, []


# --- Introspection per record kind ---


def _pydantic_fields(cls: type[BaseModel]) -> list[tuple[str, Any, list[Any]]]:
    # pydantic has already peeled Annotated metadata into FieldInfo.metadata.
    return [
        (field_name, info.annotation, list(info.metadata))
        for field_name, info in cls.model_fields.items()
    ]


def _dataclass_fields(cls: type) -> list[tuple[str, Any, list[Any]]]:
    names = [f.name for f in dataclasses.fields(cls)]
    return _annotated_fields(cls, names)


def _annotated_fields(cls: Any, names: list[str]) -> list[tuple[str, Any, list[Any]]]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        msg = f"cannot resolve field annotations of {cls.__name__}: {exc}"
        raise DefinitionError(msg, model=cls.__name__) from exc
    return [(field_name, *split_annotated(hints[field_name])) for field_name in names]


def _field_spec(model: str, field_name: str, field_type: Any, metadata: list[Any]) -> FieldSpec:
    markers = [item for item in metadata if isinstance(item, ViewPolicy)]
    if len(markers) > 1:
        msg = f"field '{field_name}' of {model} has more than one view policy"
        raise DefinitionError(msg, model=model, field=field_name)
    marker = markers[0] if markers else ViewPolicy()

    # Other metadata (constraints, descriptions) stays on the type.
    rest = [item for item in metadata if not isinstance(item, ViewPolicy)]
    if rest:
        field_type = Annotated[field_type, *rest]

    return FieldSpec(
        name=field_name,
        type=field_type,
        get=parse_policy(Mode.GET, marker.get, field=field_name, model=model),
        create=parse_policy(Mode.CREATE, marker.create, field=field_name, model=model),
        patch=parse_policy(Mode.PATCH, marker.patch, field=field_name, model=model),
    )
