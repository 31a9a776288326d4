"""Tests for the root modelviews CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from modelviews import __version__
from modelviews.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "modelviews" in result.output
    assert "inspect" in result.output
    assert "generate" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flags_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/does-not-exist.toml", "--version"])
    assert result.exit_code == 0


def test_short_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-h"])
    assert result.exit_code == 0
    assert "--project-root" in result.output


def test_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "missing.toml"), "inspect", "x:Y"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_project_root_config(
    cli_runner: CliRunner, sample_module: str, tmp_path: Path
) -> None:
    root = tmp_path / "elsewhere"
    root.mkdir()
    (root / "modelviews.toml").write_text("[derive]\nwire = true\n")
    result = cli_runner.invoke(
        cli, ["--json", "--project-root", str(root), "inspect", f"{sample_module}:Audit"]
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["data"]["wire"] is True


def test_invalid_config_value(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MODELVIEWS_CONFIG", raising=False)
    (tmp_path / "modelviews.toml").write_text('[codegen]\ncore_module = "my-app"\n')
    result = cli_runner.invoke(cli, ["inspect", "x:Y"])
    assert result.exit_code == 1
    assert "Invalid settings" in result.output
    assert "codegen.core_module" in result.output
    assert "Traceback" not in result.output
