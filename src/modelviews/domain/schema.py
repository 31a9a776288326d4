"""Model and view schema objects.

A :class:`ModelSchema` is the canonical field list of a model with three
policies per field. :func:`modelviews.domain.derive.derive` turns it into up
to three :class:`ViewSchema` objects, collected in :class:`DerivedViews`.

INVARIANT: all schema objects are frozen and keep declaration order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from modelviews.domain.policies import (
    CreatePolicy,
    GetPolicy,
    Mode,
    PatchPolicy,
    Policy,
)

DEFAULT_CORE_MODULE = "modelviews"


@dataclass(frozen=True)
class FieldSpec:
    """One declared field: name, value type and its three policies."""

    name: str
    type: Any
    get: GetPolicy = GetPolicy.REQUIRED
    create: CreatePolicy = CreatePolicy.REQUIRED
    patch: PatchPolicy = PatchPolicy.PATCH

    def policy_for(self, mode: Mode) -> Policy:
        """Return this field's policy for *mode*."""
        return getattr(self, Mode(mode).value)


@dataclass(frozen=True)
class ModelSchema:
    """Canonical definition of a model.

    Attributes:
        name: Model name; view names are derived from it.
        fields: Ordered field declarations.
        wire: Derived views carry serialization metadata (unknown-field
            rejection, omission of absent optional fields).
        core_module: Module that generated source imports the core types
            from. Definition-time only.
        model: The declaring class, when the schema was introspected.
    """

    name: str
    fields: tuple[FieldSpec, ...] = ()
    wire: bool = False
    core_module: str = DEFAULT_CORE_MODULE
    model: Any = field(default=None, compare=False)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)


@dataclass(frozen=True)
class ViewField:
    """A field of a derived view with its resolved shape.

    ``optional`` marks fields declared with an optional policy; they may be
    left out on construction. ``omit_when_absent`` additionally drops the
    field from wire output while its value is ``None``.
    """

    name: str
    shape: Any
    optional: bool = False
    omit_when_absent: bool = False


@dataclass(frozen=True)
class ViewSchema:
    """A derived, mode-specific shape of a model (``<Model>Get`` etc.)."""

    name: str
    mode: Mode
    model: str
    fields: tuple[ViewField, ...]
    wire: bool = False

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def field(self, name: str) -> ViewField:
        """Look up a view field by name.

        Raises:
            KeyError: If the view has no such field.
        """
        for view_field in self.fields:
            if view_field.name == name:
                return view_field
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    def __iter__(self) -> Iterator[ViewField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class DerivedViews:
    """Up to one view per mode. ``None`` means the mode has no view."""

    get: ViewSchema | None = None
    create: ViewSchema | None = None
    patch: ViewSchema | None = None

    def for_mode(self, mode: Mode | str) -> ViewSchema | None:
        return getattr(self, Mode(mode).value)

    def modes(self) -> tuple[Mode, ...]:
        """Modes that produced a view, in get/create/patch order."""
        return tuple(mode for mode in Mode if self.for_mode(mode) is not None)

    def __iter__(self) -> Iterator[ViewSchema]:
        for mode in Mode:
            view = self.for_mode(mode)
            if view is not None:
                yield view
