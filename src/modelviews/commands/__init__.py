"""Subcommand modules for modelviews.

Provides register_commands() which uses deferred imports to keep
``modelviews --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from modelviews.commands.generate import generate
    from modelviews.commands.inspect import inspect

    cli.add_command(inspect)
    cli.add_command(generate)
