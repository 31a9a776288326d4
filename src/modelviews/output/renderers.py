"""Human-readable rendering of service results.

Each operation registers its renderer with :func:`_renders`; operations
without one get a ``key: value`` listing of their data. Failed results
always use the error renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from modelviews.output.console import create_console, get_output, style_for_mode

if TYPE_CHECKING:
    from rich.console import Console

    from modelviews.services.result import ServiceResult

Renderer = Callable[..., None]

_RENDERERS: dict[str, Renderer] = {}


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Draw *result* with Rich and return the text.

    The console writes to a buffer, so the text carries no color codes.
    """
    console = create_console()
    if not result.ok:
        draw: Renderer = _draw_failure
    else:
        draw = _RENDERERS.get(result.op, _draw_data)
    draw(result, console, verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One view name per line; ``OK: <op>`` or ``ERROR: <op> — <message>`` otherwise."""
    if not result.ok:
        return f"ERROR: {result.op} — {_error_message(result)}"
    names = [_view_name(view) for view in result.data.get("views") or ()]
    return "\n".join(names) if names else f"OK: {result.op}"


def _renders(op: str) -> Callable[[Renderer], Renderer]:
    def register(draw: Renderer) -> Renderer:
        _RENDERERS[op] = draw
        return draw

    return register


def _error_message(result: ServiceResult) -> str:
    return result.error.message if result.error is not None else "Unknown error"


def _view_name(view: Any) -> str:
    return str(view.get("name", "")) if isinstance(view, dict) else str(view)


def _headline(console: Console, result: ServiceResult, subject: str = "") -> None:
    line = Text.assemble(("OK", "mv.ok"), (f"  {result.op}", "mv.op"))
    if subject:
        line.append(f"  {subject}")
    console.print(line)


def _key_value(console: Console, key: str, value: str) -> None:
    console.print(Text(f"  {key}: ", style="mv.key"), value, sep="", markup=False)


def _view_table(view: dict[str, Any], *, verbose: bool) -> Table:
    table = Table(
        title=Text(str(view.get("name", "")), style="mv.view"),
        title_justify="left",
        show_edge=False,
    )
    columns = ["Field", "Type"] + (["Optional", "Omit when absent"] if verbose else [])
    for column in columns:
        table.add_column(column, style="mv.type" if column == "Type" else None)

    row_style = style_for_mode(str(view.get("mode", ""))) or None
    for view_field in view.get("fields", []):
        cells = [str(view_field["name"]), str(view_field["type"])]
        if verbose:
            cells += [
                "yes" if view_field.get(flag) else "" for flag in ("optional", "omit_when_absent")
            ]
        table.add_row(*cells, style=row_style)
    return table


@_renders("inspect")
def _draw_inspect(result: ServiceResult, console: Console, verbose: bool) -> None:
    _headline(console, result, str(result.data.get("model", "")))
    for view in result.data.get("views", []):
        console.print()
        console.print(_view_table(view, verbose=verbose))
    for mode in result.data.get("missing", []):
        console.print(Text(f"no {mode} view", style="mv.warning"))


@_renders("generate")
def _draw_generate(result: ServiceResult, console: Console, verbose: bool) -> None:
    path = result.data.get("path")
    _headline(console, result, f"-> {path}" if path else "")
    for name in result.data.get("views", []):
        console.print(Text(f"  {name}", style="mv.view"))
    # Source is shown inline only when it was not written to a file.
    if path is None and "source" in result.data:
        console.print()
        console.print(str(result.data["source"]), markup=False, soft_wrap=True)


def _draw_data(result: ServiceResult, console: Console, verbose: bool) -> None:
    _headline(console, result)
    for key, value in result.data.items():
        structured = isinstance(value, (dict, list))
        shown = json.dumps(value, separators=(",", ":")) if structured else str(value)
        _key_value(console, key, shown)


def _draw_failure(result: ServiceResult, console: Console, verbose: bool) -> None:
    console.print(
        Text.assemble(("ERROR", "mv.error"), f"  {result.op} — {_error_message(result)}")
    )
    if verbose and result.error is not None:
        for key, value in result.error.detail.items():
            _key_value(console, key, str(value))
