"""Locate and read the modelviews configuration table.

Settings live either in a dedicated ``modelviews.toml`` (top-level keys) or
in the ``[tool.modelviews]`` table of a ``pyproject.toml``. The search walks
up from the starting directory and stops at the first directory holding
either; a ``modelviews.toml`` wins over a ``pyproject.toml`` next to it.
``MODELVIEWS_CONFIG`` short-circuits the search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "modelviews.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "MODELVIEWS_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: CWD), or None.

    A ``pyproject.toml`` only counts when it has a ``[tool.modelviews]``
    table. When ``MODELVIEWS_CONFIG`` is set, its path is returned if it
    names a file and no search happens either way.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        dedicated = directory / CONFIG_FILENAME
        if dedicated.is_file():
            return dedicated
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def load_config_table(path: Path) -> dict[str, Any]:
    """Read the modelviews settings table out of *path*.

    Raises:
        click.ClickException: If the file is not valid TOML.
    """
    data = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        table = data.get("tool", {}).get("modelviews", {})
        return table if isinstance(table, dict) else {}
    return data


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        # someone else's broken pyproject is not our config
        return False
    return isinstance(data.get("tool", {}).get("modelviews"), dict)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
