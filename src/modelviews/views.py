"""The ``@views`` declaration decorator and view lookup helpers.

Usage::

    @views
    class Author(BaseModel):
        id: Annotated[int, policy(create="forbidden", patch="forbidden")]
        name: str

    @views(wire=True)
    class Post(BaseModel):
        title: str
        author: Annotated[Author, policy(create="optional", patch="optional")]

    PostPatch = view_for(Post, "patch")   # fields: title: Patch[str],
                                          #         author: Patch[Optional[AuthorPatch]]

Nested models must be declared before the models that use them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, overload

from modelviews.domain.declare import schema_from_model
from modelviews.domain.derive import derive
from modelviews.domain.errors import DefinitionError
from modelviews.domain.policies import Mode
from modelviews.domain.schema import DerivedViews, ModelSchema
from modelviews.domain.shapes import ShapeRegistry, default_registry
from modelviews.infrastructure.models import materialize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelViews:
    """Everything derived for one model: schema, view schemas, view classes."""

    schema: ModelSchema
    derived: DerivedViews
    get: type[Any] | None = None
    create: type[Any] | None = None
    patch: type[Any] | None = None

    def for_mode(self, mode: Mode | str) -> type[Any] | None:
        return getattr(self, Mode(mode).value)

    def classes(self) -> dict[Mode, type[Any]]:
        """View classes keyed by mode, skipping modes without a view."""
        return {mode: cls for mode in Mode if (cls := self.for_mode(mode)) is not None}


@overload
def views[T](cls: type[T], /) -> type[T]: ...


@overload
def views[T](
    *,
    wire: bool = False,
    core_module: str | None = None,
    registry: ShapeRegistry | None = None,
) -> Callable[[type[T]], type[T]]: ...


def views(
    cls: Any = None,
    /,
    *,
    wire: bool = False,
    core_module: str | None = None,
    registry: ShapeRegistry | None = None,
) -> Any:
    """Derive and register the Get/Create/Patch views of a model class.

    Works bare (``@views``) or with options (``@views(wire=True)``).

    Args:
        wire: Views carry serialization metadata (unknown-field rejection,
            omission of absent optional fields and Ignore patches).
        core_module: Module generated source imports the core types from.
        registry: Shape registry to resolve against and register into.

    Raises:
        DefinitionError: If the declaration is inconsistent. The class is
            left unregistered.
    """

    def decorate(model: type[Any]) -> type[Any]:
        declare_views(model, wire=wire, core_module=core_module, registry=registry)
        return model

    if cls is None:
        return decorate
    return decorate(cls)


def declare_views(
    model: Any,
    *,
    wire: bool = False,
    core_module: str | None = None,
    registry: ShapeRegistry | None = None,
) -> ModelViews:
    """Non-decorator form of :func:`views`; returns the :class:`ModelViews`."""
    registry = registry if registry is not None else default_registry
    schema = schema_from_model(model, wire=wire, core_module=core_module)
    derived = derive(schema, registry)

    module = getattr(model, "__module__", None)
    classes = {view.mode: materialize(view, module=module) for view in derived}
    result = ModelViews(
        schema=schema,
        derived=derived,
        get=classes.get(Mode.GET),
        create=classes.get(Mode.CREATE),
        patch=classes.get(Mode.PATCH),
    )
    registry.register(model, {mode: classes.get(mode) for mode in Mode})
    model.__views__ = result
    logger.debug("Declared views of %s: %s", schema.name, ", ".join(classes))
    return result


def views_of(model: Any) -> ModelViews:
    """Return the :class:`ModelViews` of a declared model.

    Raises:
        DefinitionError: If *model* was never declared with :func:`views`.
    """
    result = model.__dict__.get("__views__") if isinstance(model, type) else None
    if not isinstance(result, ModelViews):
        name = getattr(model, "__name__", repr(model))
        raise DefinitionError(f"{name} has no declared views", model=name)
    return result


def view_for(model: Any, mode: Mode | str) -> type[Any] | None:
    """The view class of *model* for *mode*, or None when the mode has no view."""
    return views_of(model).for_mode(mode)


def has_view(model: Any, mode: Mode | str) -> bool:
    return view_for(model, mode) is not None
