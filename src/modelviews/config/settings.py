"""ModelViewsSettings — CLI flags, environment and config file merged.

Later sources only fill what earlier ones left unset:

  1. keyword arguments (the CLI flags)
  2. ``MODELVIEWS_*`` environment variables, ``__`` for nested keys
     (``MODELVIEWS_DERIVE__WIRE=1``)
  3. the config table found by :func:`~modelviews.config.discovery.find_config`
  4. defaults in :mod:`modelviews.config.models`
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from modelviews.config.discovery import find_config, load_config_table
from modelviews.config.models import CodegenConfig, DeriveConfig

# Config table handed to the settings source while from_cli() builds settings.
_active_table: ContextVar[dict[str, Any] | None] = ContextVar("_active_table", default=None)


class ConfigTableSource(PydanticBaseSettingsSource):
    """Settings source over an already-loaded config table."""

    def __init__(self, settings_cls: type[BaseSettings], table: dict[str, Any] | None) -> None:
        super().__init__(settings_cls)
        self._table = table or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        value = self._table.get(field_name)
        return value, field_name, isinstance(value, dict)

    def __call__(self) -> dict[str, Any]:
        # Unknown keys are ignored; [tool.modelviews] may be shared with plugins.
        known = self.settings_cls.model_fields
        return {name: value for name, value in self._table.items() if name in known}


@contextmanager
def _using_table(table: dict[str, Any] | None) -> Iterator[None]:
    token = _active_table.set(table)
    try:
        yield
    finally:
        _active_table.reset(token)


class ModelViewsSettings(BaseSettings):
    """Settings of one CLI invocation.

    Attributes:
        project_root: Where template overrides are looked up: the directory
            of the config file, else the ``--project-root`` / CWD.
        config_path: Config file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MODELVIEWS_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    codegen: CodegenConfig = Field(default_factory=CodegenConfig)
    derive: DeriveConfig = Field(default_factory=DeriveConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            ConfigTableSource(settings_cls, _active_table.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> ModelViewsSettings:
        """Build settings for a CLI run.

        An explicit *config_path* must exist; otherwise the config file is
        searched for upward from *project_root* (or the CWD).

        Raises:
            click.ClickException: If the explicit config file is missing, a
                config file is not valid TOML, or a setting has an invalid
                value.
        """
        if config_path is not None:
            path: Path | None = Path(config_path)
            if not path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            path = find_config(project_root)

        table = load_config_table(path) if path is not None else None
        if project_root is None:
            project_root = path.parent if path is not None else Path.cwd()

        try:
            with _using_table(table):
                return cls(project_root=project_root, config_path=path, **cli_flags)
        except ValidationError as exc:
            source = f" in {path}" if path is not None else ""
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise click.ClickException(f"Invalid settings{source}: {problems}") from exc
