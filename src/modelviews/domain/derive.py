"""View derivation — ModelSchema -> {Get?, Create?, Patch?}.

Per field, per mode:

- forbidden             -> field left out of that mode's view
- get required          -> shape
- get optional          -> Optional[shape]
- create required       -> shape
- create optional       -> Optional[shape], omitted on the wire when absent
- patch patch           -> Patch[shape]
- patch optional        -> Patch[Optional[shape]]

where ``shape`` is what the field's type presents in that mode (see
:mod:`modelviews.domain.shapes`).

INVARIANT: a mode with no eligible field produces no view at all (``None``),
never an empty one. Field order always follows declaration order.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Optional

from modelviews.domain.errors import DefinitionError
from modelviews.domain.patch import Patch
from modelviews.domain.policies import (
    Mode,
    Policy,
    is_forbidden,
    parse_policy,
)
from modelviews.domain.schema import DerivedViews, FieldSpec, ModelSchema, ViewField, ViewSchema
from modelviews.domain.shapes import ShapeRegistry, default_registry

logger = logging.getLogger(__name__)


def view_name(model_name: str, mode: Mode | str) -> str:
    """Conventional class name of a view: ``<Model>Get`` / ``Create`` / ``Patch``."""
    return f"{model_name}{Mode(mode).suffix}"


def derive(schema: ModelSchema, resolver: ShapeRegistry | None = None) -> DerivedViews:
    """Derive the Get, Create and Patch views of *schema*.

    Pure and idempotent; results are memoized per schema and resolver state.

    Args:
        schema: The canonical model definition.
        resolver: Shape registry for field types. Defaults to the shared
            :data:`~modelviews.domain.shapes.default_registry`.

    Raises:
        DefinitionError: On an unrecognized policy token, a nested model
            without a view for a mode that needs one, a field type with no
            known shape, or if *schema* is not a ModelSchema.
    """
    if not isinstance(schema, ModelSchema):
        msg = f"views can only be derived from a record of named fields, got {schema!r}"
        raise DefinitionError(msg)

    resolver = resolver if resolver is not None else default_registry
    try:
        hash(schema)
    except TypeError:
        return _derive(schema, resolver)
    return _derive_cached(schema, resolver, resolver.generation)


@lru_cache(maxsize=512)
def _derive_cached(schema: ModelSchema, resolver: ShapeRegistry, _generation: int) -> DerivedViews:
    return _derive(schema, resolver)


def _derive(schema: ModelSchema, resolver: ShapeRegistry) -> DerivedViews:
    collected: dict[Mode, list[ViewField]] = {mode: [] for mode in Mode}

    for spec in schema.fields:
        for mode in Mode:
            policy = parse_policy(
                mode,
                _raw_policy(spec, mode),
                field=spec.name,
                model=schema.name,
            )
            if is_forbidden(policy):
                continue
            try:
                shape = resolver.resolve(spec.type, mode)
            except DefinitionError as exc:
                msg = f"field '{spec.name}' of {schema.name}: {exc}"
                raise DefinitionError(
                    msg, model=schema.name, field=spec.name, mode=str(mode)
                ) from exc
            collected[mode].append(_view_field(spec.name, shape, mode, policy))

    views = {
        mode: ViewSchema(
            name=view_name(schema.name, mode),
            mode=mode,
            model=schema.name,
            fields=tuple(fields),
            wire=schema.wire,
        )
        for mode, fields in collected.items()
        if fields
    }
    logger.debug(
        "Derived views of %s: %s",
        schema.name,
        ", ".join(view.name for view in views.values()) or "none",
    )
    return DerivedViews(
        get=views.get(Mode.GET),
        create=views.get(Mode.CREATE),
        patch=views.get(Mode.PATCH),
    )


def _raw_policy(spec: FieldSpec, mode: Mode) -> Any:
    # FieldSpec may be built by hand with plain strings or None.
    return getattr(spec, mode.value)


def _view_field(name: str, shape: Any, mode: Mode, policy: Policy) -> ViewField:
    # Dispatch on mode first: the three policy enums share token values.
    optional = policy.value == "optional"
    if optional:
        shape = Optional[shape]
    match mode:
        case Mode.GET:
            return ViewField(name, shape, optional=optional)
        case Mode.CREATE:
            return ViewField(name, shape, optional=optional, omit_when_absent=optional)
        case Mode.PATCH:
            return ViewField(name, Patch[shape], optional=optional)
    raise DefinitionError(f"unhandled mode {mode!r} on field '{name}'", field=name)
