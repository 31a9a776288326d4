"""Themed Rich consoles for modelviews output.

Renderers draw onto a console that records into an in-memory buffer and
hand back plain text; the CLI decides which stream it lands on.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

MV_THEME = Theme(
    {
        "mv.ok": "bold green",
        "mv.error": "bold red",
        "mv.warning": "bold yellow",
        "mv.op": "bold cyan",
        "mv.key": "dim",
        "mv.view": "bold blue",
        "mv.type": "magenta",
        "mv.mode.get": "green",
        "mv.mode.create": "blue",
        "mv.mode.patch": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Return a console using :data:`MV_THEME` that writes to a buffer.

    The buffer is never a terminal, so Rich leaves out color codes unless
    forced; *no_color* also drops styles such as bold.
    """
    return Console(
        file=StringIO(),
        theme=MV_THEME,
        no_color=no_color,
        highlight=False,
        width=DEFAULT_WIDTH if width is None else width,
    )


def get_output(console: Console) -> str:
    """Text recorded so far by a console from :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console does not write to a string buffer")
    return buffer.getvalue()


def style_for_mode(mode: str) -> str:
    """Theme style for a view mode name, or ``""`` for an unknown mode."""
    style = f"mv.mode.{mode}"
    return style if style in MV_THEME.styles else ""
