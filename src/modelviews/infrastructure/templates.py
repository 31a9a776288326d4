"""Jinja2 environments: project overrides first, packaged templates second.

A project can replace any packaged template by dropping a file of the same
name into ``<project>/.modelviews/templates/<group>/`` (or directly into
``.modelviews/templates/``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
)

OVERRIDE_DIR = Path(".modelviews") / "templates"


def build_template_environment(group: str, *, project_root: Path | None = None) -> Environment:
    """Environment for the templates of *group* (e.g. ``"codegen"``).

    Undefined variables raise instead of rendering as empty strings; block
    tags do not leave blank lines behind.
    """
    loaders: list[BaseLoader] = []
    if project_root is not None:
        override_root = project_root / OVERRIDE_DIR
        loaders.append(FileSystemLoader([str(override_root / group), str(override_root)]))
    loaders.append(PackageLoader("modelviews", f"templates/{group}"))

    return Environment(
        loader=ChoiceLoader(loaders),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_template(
    group: str,
    name: str,
    *,
    project_root: Path | None = None,
    **context: Any,
) -> str:
    """Render template *name* of *group* with *context*."""
    env = build_template_environment(group, project_root=project_root)
    return env.get_template(name).render(**context)
