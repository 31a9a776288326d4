"""Materialize ViewSchema objects as pydantic model classes.

Each derived view becomes a ``pydantic.BaseModel`` subclass of one of the
view bases below, built at declaration time with ``create_model``.

Wire views (``ModelSchema.wire``) add the serialization contract:

- Create and Patch views reject unknown fields on decode.
- Create views drop optional fields that are ``None`` on encode.
- Patch views drop Ignore fields on encode, so "omitted", ``null`` and a
  value survive a dump/load round trip as three distinct states.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    create_model,
    model_serializer,
)

from modelviews.domain.patch import Patch
from modelviews.domain.policies import Mode
from modelviews.domain.schema import ViewField, ViewSchema

logger = logging.getLogger(__name__)


class _ViewBase(BaseModel):
    """Common base of every materialized view."""

    __view_schema__: ClassVar[ViewSchema | None] = None


class GetView(_ViewBase):
    """Read view of a model."""

    @classmethod
    def from_model(cls, instance: Any) -> Self:
        """Project a canonical model instance (or any object) onto this view."""
        return cls.model_validate(instance, from_attributes=True)


class CreateView(_ViewBase):
    """Construction view of a model."""


class PatchView(_ViewBase):
    """Partial-update view of a model. Every field defaults to Ignore."""

    def changes(self) -> dict[str, Any]:
        """Return ``{field: new_value}`` for the fields set to Update."""
        return {
            name: patch.value
            for name in type(self).model_fields
            if isinstance(patch := getattr(self, name), Patch) and patch.is_update
        }

    def is_empty(self) -> bool:
        """True when every field is Ignore."""
        return not self.changes()


class WireGetView(GetView):
    """Read view with serialization metadata."""


class WireCreateView(CreateView):
    """Create view that rejects unknown fields and omits absent optionals."""

    model_config = ConfigDict(extra="forbid")

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        # Optional create fields are exactly the non-required ones defaulting to None.
        for name, info in type(self).model_fields.items():
            if not info.is_required() and info.default is None and getattr(self, name) is None:
                data.pop(name, None)
        return data


class WirePatchView(PatchView):
    """Patch view that rejects unknown fields and omits Ignore fields."""

    model_config = ConfigDict(extra="forbid")

    @model_serializer(mode="wrap")
    def _omit_ignored(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, Patch) and value.is_ignore:
                data.pop(name, None)
        return data


VIEW_BASES: dict[tuple[Mode, bool], type[_ViewBase]] = {
    (Mode.GET, False): GetView,
    (Mode.CREATE, False): CreateView,
    (Mode.PATCH, False): PatchView,
    (Mode.GET, True): WireGetView,
    (Mode.CREATE, True): WireCreateView,
    (Mode.PATCH, True): WirePatchView,
}


def materialize(view: ViewSchema, *, module: str | None = None) -> type[_ViewBase]:
    """Build the pydantic class for *view*.

    Optional Get/Create fields default to ``None``, Patch fields default to
    Ignore; all other fields are required.

    Args:
        view: The derived view schema.
        module: ``__module__`` of the new class (normally the declaring
            model's module).
    """
    definitions: dict[str, Any] = {
        view_field.name: (view_field.shape, _default(view.mode, view_field))
        for view_field in view.fields
    }
    base = VIEW_BASES[(view.mode, view.wire)]
    model = create_model(
        view.name,
        __base__=base,
        __module__=module or __name__,
        **definitions,
    )
    model.__view_schema__ = view
    logger.debug("Materialized view %s (%d fields)", view.name, len(view.fields))
    return model


def _default(mode: Mode, view_field: ViewField) -> Any:
    if mode is Mode.PATCH:
        return Patch.ignore()
    if view_field.optional:
        return None
    return ...
