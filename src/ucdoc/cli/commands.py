"""CLI commands for ucdoc."""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ucdoc.config import UcdocSettings, load_settings
from ucdoc.decision import CoverageWarning
from ucdoc.errors import UcdocError
from ucdoc.parser import ParseResult, generator_for, parse_files
from ucdoc.reporters import (
    BaseReporter,
    DecisionTableReporter,
    PictReporter,
    UseCaseReporter,
    UseCaseTestReporter,
)

console = Console()


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Print any :class:`UcdocError` and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UcdocError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False, soft_wrap=True)
            sys.exit(1)

    return wrapper


def spec_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command reading spec files."""
    func = click.option(
        "--generator",
        type=click.Choice(["pict", "builtin"]),
        default=None,
        help="Combination generator (overrides settings)",
    )(func)
    func = click.option(
        "--strict/--lenient",
        default=None,
        help="Fail on the first coverage gap, or report gaps as warnings",
    )(func)
    func = click.argument(
        "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )(func)
    return func


def output_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--output",
        "-o",
        "output_dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=Path("."),
        show_default=True,
        help="Directory the documents are written to",
    )(func)


def _settings(ctx: click.Context, strict: bool | None, generator: str | None) -> UcdocSettings:
    return load_settings(ctx.obj.get("config_path"), strict=strict, generator=generator)


def _print_warnings(warnings: list[CoverageWarning]) -> None:
    if not warnings:
        return
    table = Table(title="Coverage warnings")
    table.add_column("Use case", style="cyan")
    table.add_column("Variation")
    table.add_column("Gap")
    table.add_column("Details")
    table.add_column("Hint", style="dim")
    for warning in warnings:
        detail = warning.message
        if warning.rule_numbers:
            detail = f"rules {', '.join(str(n) for n in warning.rule_numbers)}"
        elif warning.uncovered_ids:
            detail = ", ".join(warning.uncovered_ids)
        table.add_row(
            warning.usecase_id,
            warning.variation_id or "-",
            warning.kind.value,
            escape(detail),
            escape(warning.hint),
        )
    console.print(table)


def _write(reporter: BaseReporter, result: ParseResult, output_dir: Path) -> None:
    _print_warnings(result.warnings)
    written = reporter.save(result.app, output_dir)
    console.print(f"[green]Wrote {len(written)} file(s) to {output_dir}[/green]")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to config file")
@click.version_option(package_name="ucdoc")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """ucdoc - use case documents, decision tables and test scenarios."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose

    setup_logging(verbose)


@cli.command()
@spec_options
@output_option
@click.pass_context
@handle_errors
def usecase(
    ctx: click.Context, files: tuple[Path, ...], strict: bool | None, generator: str | None, output_dir: Path
) -> None:
    """Write the use case descriptions (<uc>.md)."""
    settings = _settings(ctx, strict, generator)
    result = parse_files(files, settings)
    _write(UseCaseReporter(encoding=settings.encoding), result, output_dir)


@cli.command()
@spec_options
@output_option
@click.pass_context
@handle_errors
def decision(
    ctx: click.Context, files: tuple[Path, ...], strict: bool | None, generator: str | None, output_dir: Path
) -> None:
    """Write the decision table of every variation (<uc>-<variation>.decision.md)."""
    settings = _settings(ctx, strict, generator)
    result = parse_files(files, settings)
    _write(DecisionTableReporter(encoding=settings.encoding), result, output_dir)


@cli.command()
@spec_options
@output_option
@click.pass_context
@handle_errors
def pict(
    ctx: click.Context, files: tuple[Path, ...], strict: bool | None, generator: str | None, output_dir: Path
) -> None:
    """Write the generated covering of every variation (<uc>-<variation>.pict.md)."""
    settings = _settings(ctx, strict, generator)
    result = parse_files(files, settings)
    _write(PictReporter(encoding=settings.encoding), result, output_dir)


@cli.command()
@spec_options
@output_option
@click.pass_context
@handle_errors
def uctest(
    ctx: click.Context, files: tuple[Path, ...], strict: bool | None, generator: str | None, output_dir: Path
) -> None:
    """Write the use case test documents (<uc>.uctest.md)."""
    settings = _settings(ctx, strict, generator)
    combination_generator = generator_for(settings)
    result = parse_files(files, settings, combination_generator)
    reporter = UseCaseTestReporter(
        combination_generator,
        scenario_id_prefix=settings.scenario_id_prefix,
        encoding=settings.encoding,
    )
    _write(reporter, result, output_dir)


@cli.command()
@spec_options
@click.pass_context
@handle_errors
def validate(ctx: click.Context, files: tuple[Path, ...], strict: bool | None, generator: str | None) -> None:
    """Parse the spec files and check decision table coverage."""
    settings = _settings(ctx, strict, generator)
    result = parse_files(files, settings)

    table = Table(title="Use cases")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Variations", justify="right")
    table.add_column("Rules", justify="right")
    for uc in result.app.usecases:
        table.add_row(
            uc.id,
            uc.name,
            str(len(uc.variations)),
            str(sum(variation.rule_count for variation in uc.variations)),
        )
    console.print(table)

    if result.warnings:
        _print_warnings(result.warnings)
        console.print(f"[yellow]{len(result.warnings)} coverage warning(s)[/yellow]")
    else:
        console.print("[green]No coverage gaps[/green]")
