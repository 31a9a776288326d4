"""Shared pytest fixtures for modelviews tests."""

from __future__ import annotations

import importlib
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from modelviews.domain.shapes import ShapeRegistry

SAMPLE_MODULE = "sample_models"

SAMPLE_SOURCE = '''\
from typing import Annotated

from pydantic import BaseModel

from modelviews import policy, views


@views
class Author(BaseModel):
    id: Annotated[int, policy(create="forbidden", patch="forbidden")]
    name: str


@views(wire=True)
class Post(BaseModel):
    id: Annotated[int, policy(create="forbidden", patch="forbidden")]
    title: str
    author: Annotated[Author, policy(create="optional", patch="optional")]


class Audit(BaseModel):
    id: Annotated[int, policy(create="forbidden", patch="forbidden")]
    at: Annotated[str, policy(create="forbidden", patch="forbidden")]


class Broken(BaseModel):
    name: Annotated[str, policy(get="sometimes")]


NOT_A_MODEL = 42
'''


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ShapeRegistry:
    """A fresh shape registry, isolated from the shared default."""
    return ShapeRegistry()


@pytest.fixture
def sample_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Write an importable module of sample models and return its name.

    Also changes CWD to the temp directory so no stray modelviews.toml is
    picked up by config discovery.
    """
    (tmp_path / f"{SAMPLE_MODULE}.py").write_text(SAMPLE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MODELVIEWS_CONFIG", raising=False)
    importlib.invalidate_caches()
    try:
        yield SAMPLE_MODULE
    finally:
        sys.modules.pop(SAMPLE_MODULE, None)


@pytest.fixture
def write_module(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Callable[[str, str], str]]:
    """Return a writer for importable-by-the-CLI modules in the temp directory.

    CWD moves to the temp directory but, unlike ``sample_module``, nothing
    is added to ``sys.path``; the code under test has to find the modules.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MODELVIEWS_CONFIG", raising=False)
    monkeypatch.setattr(sys, "path", [entry for entry in sys.path if entry not in ("", ".")])
    written: list[str] = []

    def write(name: str, source: str) -> str:
        (tmp_path / f"{name}.py").write_text(source, encoding="utf-8")
        written.append(name)
        importlib.invalidate_caches()
        return name

    try:
        yield write
    finally:
        for name in written:
            sys.modules.pop(name, None)
