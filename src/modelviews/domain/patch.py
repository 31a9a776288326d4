"""Patch — a two-state value for partial updates.

A ``Patch[T]`` is either *Ignore* ("leave the current value unchanged") or
*Update(value)* ("replace the current value with ``value``"). Unlike a bare
``Optional[T]`` the intent to skip a field is explicit, and a
``Patch[Optional[T]]`` can still carry "update to ``None``".

INVARIANT: Patch instances are immutable and every operation is total.

Conversion against plain optionals uses ``None`` as the absent marker:

    Patch.update(v).to_optional() == v
    Patch.ignore().to_optional() is None
    Patch.from_optional(None) == Patch.ignore()
"""

from __future__ import annotations

import types
from functools import total_ordering
from typing import Any, Final, Generic, TypeVar, Union, get_args, get_origin

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

T = TypeVar("T")


class _Missing:
    """Sentinel type for "no value supplied"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Final = _Missing()


@total_ordering
class Patch(Generic[T]):
    """Either Ignore or Update(value).

    ``Patch()`` is Ignore, ``Patch(value)`` is Update(value). Prefer the
    named constructors :meth:`update` and :meth:`ignore` in calling code.
    """

    __slots__ = ("_value",)

    _value: T | _Missing

    def __init__(self, value: T | _Missing = _MISSING) -> None:
        object.__setattr__(self, "_value", value)

    # --- Constructors ---

    @classmethod
    def update(cls, value: T) -> Patch[T]:
        """A patch that replaces the current value with *value*."""
        return cls(value)

    @classmethod
    def ignore(cls) -> Patch[T]:
        """A patch that leaves the current value unchanged."""
        return cls()

    @classmethod
    def from_optional(cls, value: T | None) -> Patch[T]:
        """``None`` becomes Ignore; anything else becomes Update(value)."""
        if value is None:
            return cls()
        return cls(value)

    # --- Queries ---

    @property
    def is_ignore(self) -> bool:
        return self._value is _MISSING

    @property
    def is_update(self) -> bool:
        return self._value is not _MISSING

    @property
    def value(self) -> T:
        """The update value.

        Raises:
            AttributeError: If this patch is Ignore. Check :attr:`is_update`
                first, or use :meth:`to_optional`.
        """
        if isinstance(self._value, _Missing):
            raise AttributeError("Patch.ignore() carries no value")
        return self._value

    def to_optional(self) -> T | None:
        """Update(v) -> ``v``; Ignore -> ``None``."""
        if isinstance(self._value, _Missing):
            return None
        return self._value

    # --- Value semantics ---

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Patch):
            if self.is_ignore or other.is_ignore:
                return self.is_ignore and other.is_ignore
            return bool(self._value == other._value)
        # Plain optional: None is absent, anything else is present.
        if other is None:
            return self.is_ignore
        return self.is_update and bool(self._value == other)

    def __hash__(self) -> int:
        return hash(self.to_optional())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        if self.is_ignore:
            return other.is_update
        if other.is_ignore:
            return False
        return bool(self._value < other._value)  # type: ignore[operator]

    def __repr__(self) -> str:
        if self.is_ignore:
            return "Patch.ignore()"
        return f"Patch.update({self._value!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        if self.is_ignore:
            return (Patch, ())
        return (Patch, (self._value,))

    # --- pydantic integration ---

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        """Validate through the inner type and serialize as the bare value.

        A ``null`` input becomes Update(None) when the inner type admits
        ``None``, and Ignore otherwise.
        """
        args = get_args(source_type)
        inner_type: Any = args[0] if args else Any
        inner_schema = handler.generate_schema(inner_type)
        nullable = admits_none(inner_type)

        def validate(value: Any, inner: core_schema.ValidatorFunctionWrapHandler) -> Patch[Any]:
            if isinstance(value, Patch):
                if value.is_ignore:
                    return value
                value = value._value
            if value is None and not nullable:
                return cls()
            return cls(inner(value))

        def serialize(value: Any, inner: core_schema.SerializerFunctionWrapHandler) -> Any:
            if isinstance(value, Patch):
                if value.is_ignore:
                    return None
                return inner(value._value)
            return inner(value)

        return core_schema.no_info_wrap_validator_function(
            validate,
            inner_schema,
            serialization=core_schema.wrap_serializer_function_ser_schema(
                serialize,
                schema=inner_schema,
            ),
        )


def admits_none(tp: Any) -> bool:
    """True when the annotation *tp* accepts ``None`` (``Optional[X]``, ``X | None``, ``Any``)."""
    if tp is Any or tp is None or tp is type(None):
        return True
    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        return any(admits_none(arg) for arg in get_args(tp))
    return False
