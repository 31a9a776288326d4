"""Render derived views as Python source.

The runtime path (:mod:`modelviews.infrastructure.models`) builds view
classes in memory. This module is the build-time alternative: it emits a
module of ordinary pydantic class definitions that type checkers and IDEs
can read. Nested views are emitted before the views that reference them.

``Annotated`` constraint metadata is not rendered; generated fields carry
the bare type.
"""

from __future__ import annotations

import enum
import logging
import types
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Any, Literal, Union, get_args, get_origin

from modelviews.domain.patch import Patch
from modelviews.domain.policies import Mode
from modelviews.domain.schema import DEFAULT_CORE_MODULE, ViewSchema
from modelviews.infrastructure.models import VIEW_BASES
from modelviews.infrastructure.templates import render_template

logger = logging.getLogger(__name__)

_BUILTIN_MODULE = "builtins"


@dataclass
class ShapeFormatter:
    """Format type shapes as source text, collecting the imports they need."""

    core_module: str = DEFAULT_CORE_MODULE
    local_names: set[str] = field(default_factory=set)
    imports: dict[str, set[str]] = field(default_factory=lambda: defaultdict(set))

    def format(self, shape: Any) -> str:
        if shape is None or shape is type(None):
            return "None"
        if shape is Any:
            return self._typing("Any")
        if shape is Ellipsis:
            return "..."

        origin = get_origin(shape)
        args = get_args(shape)
        if origin is Annotated:
            return self.format(args[0])
        if origin is Patch:
            self.imports[self.core_module].add("Patch")
            return f"Patch[{self.format(args[0]) if args else self._typing('Any')}]"
        if origin is Union or origin is types.UnionType:
            members = [arg for arg in args if arg is not type(None)]
            if len(members) < len(args) and len(members) == 1:
                return f"{self._typing('Optional')}[{self.format(members[0])}]"
            return f"{self._typing('Union')}[{', '.join(self.format(arg) for arg in args)}]"
        if origin is Literal:
            return f"{self._typing('Literal')}[{', '.join(repr(arg) for arg in args)}]"
        if origin is not None:
            name = self._reference(origin)
            if not args:
                return name
            return f"{name}[{', '.join(self.format(arg) for arg in args)}]"
        if isinstance(shape, type):
            return self._reference(shape)
        return repr(shape)

    def import_lines(self) -> list[str]:
        """``from x import a, b`` lines, sorted by module."""
        return [
            f"from {module} import {', '.join(sorted(names))}"
            for module, names in sorted(self.imports.items())
            if names
        ]

    def _typing(self, name: str) -> str:
        self.imports["typing"].add(name)
        return name

    def _reference(self, tp: type) -> str:
        name = tp.__qualname__
        module = tp.__module__
        if name in self.local_names and getattr(tp, "__view_schema__", None) is not None:
            return name
        if module != _BUILTIN_MODULE:
            self.imports[module].add(name.split(".")[0])
        return name


@dataclass(frozen=True)
class RenderedField:
    name: str
    annotation: str
    default: str | None


@dataclass(frozen=True)
class RenderedView:
    name: str
    base: str
    doc: str
    fields: tuple[RenderedField, ...]


def collect_views(roots: Iterable[type[Any]]) -> list[ViewSchema]:
    """Gather the view schemas of *roots* and every nested view they use.

    Returns them dependencies first, each view once.
    """
    ordered: list[ViewSchema] = []
    seen: set[str] = set()

    def visit(view_cls: type[Any]) -> None:
        schema: ViewSchema | None = getattr(view_cls, "__view_schema__", None)
        if schema is None or schema.name in seen:
            return
        seen.add(schema.name)
        for view_field in schema.fields:
            for dependency in _view_classes_in(view_field.shape):
                visit(dependency)
        ordered.append(schema)

    for root in roots:
        visit(root)
    return ordered


def render_module(
    views: Iterable[ViewSchema],
    *,
    core_module: str = DEFAULT_CORE_MODULE,
    header: str | None = None,
    project_root: Path | None = None,
) -> str:
    """Render *views* (dependencies first) as the source of one module."""
    views = list(views)
    formatter = ShapeFormatter(core_module=core_module, local_names={v.name for v in views})
    rendered = [_render_view(view, formatter) for view in views]

    source = render_template(
        "codegen",
        "module.py.j2",
        project_root=project_root,
        header=header,
        models=sorted({view.model for view in views}),
        imports=formatter.import_lines(),
        views=rendered,
    )
    logger.debug("Rendered module with %d views", len(views))
    return source


def _render_view(view: ViewSchema, formatter: ShapeFormatter) -> RenderedView:
    base = VIEW_BASES[(view.mode, view.wire)].__name__
    formatter.imports[formatter.core_module].add(base)
    fields = tuple(
        RenderedField(
            name=view_field.name,
            annotation=formatter.format(view_field.shape),
            default=_default_source(view.mode, view_field.optional),
        )
        for view_field in view.fields
    )
    return RenderedView(
        name=view.name,
        base=base,
        doc=f"{view.mode.suffix} view of {view.model}.",
        fields=fields,
    )


def _default_source(mode: Mode, optional: bool) -> str | None:
    if mode is Mode.PATCH:
        return "Patch.ignore()"
    if optional:
        return "None"
    return None


def _view_classes_in(shape: Any) -> list[type[Any]]:
    if isinstance(shape, type) and getattr(shape, "__view_schema__", None) is not None:
        return [shape]
    if isinstance(shape, type) and issubclass(shape, enum.Enum):
        return []
    found: list[type[Any]] = []
    for arg in get_args(shape):
        found.extend(_view_classes_in(arg))
    return found
