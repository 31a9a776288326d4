"""ViewsCommand — click Command with an on-demand ``--examples`` flag.

Example invocations stay out of ``--help``;
``modelviews <command> --examples`` prints them and exits.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click


class ViewsCommand(click.Command):
    """click Command that lists example invocations on ``--examples``."""

    def __init__(self, *args: Any, examples: Sequence[str] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show example invocations and exit.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':")
        for line in self.examples:
            click.echo(f"  $ {line}")
        ctx.exit(0)
