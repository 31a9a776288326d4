"""Command: show the derived views of a model."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from modelviews.commands._base import ViewsCommand

if TYPE_CHECKING:
    from modelviews.commands._context import AppContext


@click.command(
    cls=ViewsCommand,
    examples=(
        "modelviews inspect myapp.models:User",
        "modelviews --json inspect myapp.models:User",
        "modelviews -v inspect myapp.models.User",
    ),
)
@click.argument("target")
@click.pass_obj
def inspect(app: AppContext, target: str) -> None:
    """Show the Get/Create/Patch views derived from TARGET (module:Model)."""
    from modelviews.services.inspect import InspectService

    app.emit(InspectService(app.settings).inspect(target))
