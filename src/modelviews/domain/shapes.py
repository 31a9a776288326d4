"""Field shape resolution — "what does type V look like in mode M".

Scalars look the same in every mode. A model registered here looks like
its own derived view for the mode. Generic containers resolve their
arguments. The registry is keyed by (type identity, mode) and is filled as
each model is declared, so nested models resolve bottom-up: a model must be
registered before another model can reference it.
"""

from __future__ import annotations

import datetime as dt
import enum
import logging
import types
import uuid
from collections import abc
from collections.abc import Iterable
from decimal import Decimal
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from modelviews.domain.errors import DefinitionError
from modelviews.domain.policies import Mode

logger = logging.getLogger(__name__)

SCALAR_TYPES: frozenset[type] = frozenset(
    {
        bool,
        int,
        float,
        str,
        bytes,
        Decimal,
        uuid.UUID,
        dt.datetime,
        dt.date,
        dt.time,
        dt.timedelta,
    }
)

# Containers whose arguments are resolved element-wise.
_CONTAINER_ORIGINS: frozenset[Any] = frozenset(
    {list, set, frozenset, tuple, dict, abc.Sequence, abc.Mapping, abc.Set}
)


class ShapeRegistry:
    """Explicit (type, mode) -> shape table.

    Usage::

        registry = ShapeRegistry()
        registry.register_view(Author, Mode.GET, AuthorGet)
        registry.resolve(Author, Mode.GET)        # AuthorGet
        registry.resolve(list[Author], Mode.GET)  # list[AuthorGet]
    """

    def __init__(self, scalars: Iterable[type] = SCALAR_TYPES) -> None:
        self._scalars: set[type] = set(scalars)
        self._models: set[Any] = set()
        self._shapes: dict[tuple[Any, Mode], Any] = {}
        self.generation = 0  # bumped on every mutation; derive() caches per generation

    # --- Registration ---

    def register_scalar(self, tp: type) -> None:
        """Treat *tp* as a scalar: identity shape in every mode."""
        self._scalars.add(tp)
        self.generation += 1

    def register_model(self, model: Any) -> None:
        """Mark *model* as a nested-model type, possibly with no views yet."""
        self._models.add(model)
        self.generation += 1

    def register_view(self, model: Any, mode: Mode | str, shape: Any) -> None:
        """Record *shape* as the view of *model* for *mode*."""
        mode = Mode(mode)
        self._models.add(model)
        self._shapes[(model, mode)] = shape
        self.generation += 1
        logger.debug("Registered %s view of %s", mode, _type_name(model))

    def register(self, model: Any, views: dict[Mode, Any | None]) -> None:
        """Register a model together with every view it produced.

        Modes mapped to ``None`` stay unregistered, so resolving them later
        is an inconsistent-composition error.
        """
        self.register_model(model)
        for mode, shape in views.items():
            if shape is not None:
                self.register_view(model, mode, shape)

    def unregister(self, model: Any) -> None:
        """Forget *model* and all of its views."""
        self._models.discard(model)
        for mode in Mode:
            self._shapes.pop((model, mode), None)
        self.generation += 1

    # --- Queries ---

    def is_scalar(self, tp: Any) -> bool:
        if isinstance(tp, type) and issubclass(tp, enum.Enum):
            return True
        return _member(tp, self._scalars)

    def is_model(self, tp: Any) -> bool:
        return _member(tp, self._models)

    def lookup(self, model: Any, mode: Mode | str) -> Any | None:
        """The registered view of *model* for *mode*, or None."""
        return self._shapes.get((model, Mode(mode)))

    def resolve(self, tp: Any, mode: Mode | str) -> Any:
        """Return the shape *tp* presents in *mode*.

        Raises:
            DefinitionError: If *tp* is a registered model without a view for
                *mode*, or if no shape is known for *tp*.
        """
        mode = Mode(mode)

        if tp is Any or tp is None or tp is type(None):
            return tp
        origin = get_origin(tp)
        if origin is Annotated:
            inner, *metadata = get_args(tp)
            return Annotated[self.resolve(inner, mode), *metadata]
        if self.is_model(tp):
            shape = self._shapes.get((tp, mode))
            if shape is None:
                msg = (
                    f"{_type_name(tp)} has no {mode} view (no field is eligible for {mode}), "
                    f"so it cannot be used in a {mode} view"
                )
                raise DefinitionError(msg, model=_type_name(tp), mode=str(mode))
            return shape
        if self.is_scalar(tp):
            return tp

        if origin is Literal:
            return tp
        if origin is Union or origin is types.UnionType:
            return Union[tuple(self.resolve(arg, mode) for arg in get_args(tp))]
        if origin in _CONTAINER_ORIGINS:
            args = tuple(
                arg if arg is Ellipsis else self.resolve(arg, mode) for arg in get_args(tp)
            )
            if not args:
                return tp
            return origin[args]
        if _member(tp, _CONTAINER_ORIGINS):
            return tp

        msg = (
            f"no {mode} shape known for type {_type_name(tp)}; "
            "declare views on it or register it as a scalar"
        )
        raise DefinitionError(msg, mode=str(mode))

    def __contains__(self, model: object) -> bool:
        return self.is_model(model)


def _member(tp: Any, group: set[Any] | frozenset[Any]) -> bool:
    try:
        return tp in group
    except TypeError:  # unhashable annotation, e.g. Literal of a list
        return False


def _type_name(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


default_registry = ShapeRegistry()
