"""``modelviews`` entry point: global flags, settings, subcommands."""

from __future__ import annotations

from pathlib import Path

import click

from modelviews import __version__
from modelviews.commands import register_commands
from modelviews.commands._context import AppContext
from modelviews.config.settings import ModelViewsSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(__version__, "-V", "--version", prog_name="modelviews")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only view names.")
@click.option("-v", "--verbose", is_flag=True, help="Show field flags and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Use this config file instead of searching for modelviews.toml / pyproject.toml.",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to start the config search from and to read template overrides from.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: Path | None,
    project_root: Path | None,
) -> None:
    """modelviews: derive Get, Create and Patch views from annotated models."""
    ctx.obj = AppContext(
        ModelViewsSettings.from_cli(
            config_path=config_path,
            project_root=project_root,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
