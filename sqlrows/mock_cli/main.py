"""sqlrows-mock CLI entrypoint."""

from __future__ import annotations

from typing import Any

import click
from rich.traceback import install

from sqlrows.mock.fixtures import load_fixture
from sqlrows.mock.registry import Dialect
from sqlrows.mock.rowset import MockRowSet
from sqlrows.rowset.contract import Ref
from sqlrows.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from sqlrows.shared.exceptions import SetupError

from . import render

OUTPUT_FORMAT_CHOICES = ("table", "json")

install(show_locals=False)


def _raise_setup_error(message: str) -> None:
    raise SetupError(message)


@click.group(help="Inspect mock result sets and the dialect type tables.")
@common_cli_options
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for sqlrows-mock commands."""
    cli_ctx.logger.debug(f"sqlrows-mock using config {cli_ctx.config.source_path}")


@cli.command("describe")
@click.argument("specs", nargs=-1, required=True)
@click.option("--dialect", type=str, help="Database dialect (defaults to the configured one).")
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(OUTPUT_FORMAT_CHOICES),
)
@pass_cli_context
@handle_cli_errors
def describe(cli_ctx: CLIContext, specs: tuple[str, ...], dialect: str | None, output_format: str) -> None:
    """Parse column SPECS and show the resulting column types."""
    row_set = MockRowSet(
        specs,
        dialect or cli_ctx.config.mock.dialect,
        on_failure=_raise_setup_error,
        logger=cli_ctx.logger,
    )
    render.render_column_types(row_set.column_types(), output_format=output_format)


@cli.command("types")
@click.option("--dialect", type=str, help="Database dialect (defaults to the configured one).")
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(OUTPUT_FORMAT_CHOICES),
)
@pass_cli_context
@handle_cli_errors
def list_types(cli_ctx: CLIContext, dialect: str | None, output_format: str) -> None:
    """List the native type name and defaults for every semantic type."""
    resolved = Dialect.parse(dialect or cli_ctx.config.mock.dialect)
    render.render_type_table(resolved, output_format=output_format)


@cli.command("preview")
@click.argument("fixture", type=click.Path(path_type=str))
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(OUTPUT_FORMAT_CHOICES),
)
@pass_cli_context
@handle_cli_errors
def preview(cli_ctx: CLIContext, fixture: str, output_format: str) -> None:
    """Load a YAML FIXTURE and print its rows as a consumer would scan them."""
    row_set = load_fixture(
        fixture,
        config=cli_ctx.config,
        on_failure=_raise_setup_error,
        logger=cli_ctx.logger,
    )
    if row_set is None:
        raise click.ClickException(f"Fixture {fixture} produced no row set")

    columns = row_set.columns()
    rows: list[list[Any]] = []
    while row_set.next():
        refs = [Ref() for _ in columns]
        row_set.scan(*refs)
        rows.append([ref.value for ref in refs])
    row_set.close()

    cli_ctx.logger.debug(f"Scanned {len(rows)} row(s) from {fixture}")
    render.render_rows(columns, rows, output_format=output_format)


def main() -> None:  # pragma: no cover - console script entry
    cli()
