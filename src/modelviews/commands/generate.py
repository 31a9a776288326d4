"""Command: write derived views as Python source."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
from pydantic import ValidationError

from modelviews.commands._base import ViewsCommand
from modelviews.config.models import CodegenConfig

if TYPE_CHECKING:
    from modelviews.commands._context import AppContext


def _check_core_module(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> str | None:
    if value is None:
        return None
    try:
        return CodegenConfig(core_module=value).core_module
    except ValidationError as exc:
        raise click.BadParameter(f"{value!r} is not a dotted module name") from exc


@click.command(
    cls=ViewsCommand,
    examples=(
        "modelviews generate myapp.models:User",
        "modelviews generate myapp.models:User myapp.models:Post -o myapp/views.py",
        "modelviews generate myapp.models:User --core-module myapp.vendor.modelviews",
    ),
)
@click.argument("targets", nargs=-1, required=True)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the module to this file instead of stdout.",
)
@click.option(
    "--core-module",
    default=None,
    callback=_check_core_module,
    help="Module to import Patch and view bases from.",
)
@click.pass_obj
def generate(
    app: AppContext,
    targets: tuple[str, ...],
    output: Path | None,
    core_module: str | None,
) -> None:
    """Generate view class source for TARGETS (module:Model ...)."""
    from modelviews.services.generate import GenerateService

    result = GenerateService(app.settings).generate(
        list(targets),
        output=output,
        core_module=core_module,
    )
    # Bare source on stdout so it can be redirected into a file.
    app.emit(result, raw=result.data.get("source"))
