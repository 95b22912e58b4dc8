from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from sqlrows.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from sqlrows.shared.config import load_config
from sqlrows.shared.exceptions import ConfigurationError, NoMoreRowsError, SetupError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_common_cli_options_builds_context(runner: CliRunner, isolated_config: Path) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"dialect={cli_ctx.config.mock.dialect} verbose={cli_ctx.verbose}")

    result = runner.invoke(sample, ["--verbose"])

    assert result.exit_code == 0, result.output
    assert "dialect=snowflake verbose=True" in result.output


def test_common_cli_options_reads_config_file(runner: CliRunner, isolated_config: Path) -> None:
    cfg_file = isolated_config / "custom.yaml"
    cfg_file.write_text("mock:\n  dialect: postgres\nlogging:\n  verbose: true\n", encoding="utf-8")

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"dialect={cli_ctx.config.mock.dialect} verbose={cli_ctx.logger.verbose}")

    result = runner.invoke(sample, ["--config", str(cfg_file)])

    assert result.exit_code == 0, result.output
    assert "dialect=postgres verbose=True" in result.output


def test_common_cli_options_reports_bad_config(
    monkeypatch: pytest.MonkeyPatch, runner: CliRunner, isolated_config: Path
) -> None:
    def broken(config_path: str | None) -> None:
        raise ConfigurationError("bad config")

    monkeypatch.setattr("sqlrows.shared.cli.load_config", broken)

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:  # pragma: no cover - never reached
        click.echo("unreachable")

    result = runner.invoke(sample, [])

    assert result.exit_code != 0
    assert "bad config" in result.output


@pytest.mark.parametrize(
    "error, expected",
    [
        (ConfigurationError("broken"), "Configuration error: broken"),
        (SetupError("unknown keyword in column spec: x"), "Invalid mock setup: unknown keyword in column spec: x"),
        (NoMoreRowsError("no more rows"), "no more rows"),
    ],
)
def test_handle_cli_errors_converts_project_errors(
    runner: CliRunner, error: Exception, expected: str
) -> None:
    @click.command()
    @handle_cli_errors
    def sample() -> None:
        raise error

    result = runner.invoke(sample, [])

    assert result.exit_code == 1
    assert expected in result.output


def test_load_config_matches_cli_default(isolated_config: Path) -> None:
    assert load_config().source_path == isolated_config / "config.yaml"
