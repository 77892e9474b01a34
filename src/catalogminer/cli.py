"""Command-line interface for CatalogMiner."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import click
import structlog
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from catalogminer import __version__
from catalogminer.catalog.genres import GenreMapper
from catalogminer.config.config import Config, load_config
from catalogminer.exceptions import ConfigurationError
from catalogminer.extractor.fallback import fallback_catalog
from catalogminer.extractor.models import ExtractedRecord
from catalogminer.extractor.pipeline import run_extraction
from catalogminer.observability.logging import configure_logging

console = Console()
logger = structlog.get_logger(__name__)


def _fail(message: str, code: int = 2) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def _printable(text: str) -> str:
    # lone surrogates from the decoder cannot be written as UTF-8
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _render_records(records: Sequence[ExtractedRecord], output_format: str, title: str) -> None:
    if output_format == "json":
        click.echo(_printable(json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)))
        return

    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Author", style="magenta")
    table.add_column("Rating", justify="right")
    table.add_column("Categories")
    for index, record in enumerate(records, start=1):
        table.add_row(
            str(index),
            _printable(record.title),
            _printable(record.authors_display),
            record.rating_display,
            _printable(record.categories_display),
        )
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """CatalogMiner - extract records from catalog API responses."""
    ctx.ensure_object(dict)
    try:
        settings = load_config(Path(config) if config else None)
    except (ValidationError, ConfigurationError, FileNotFoundError) as e:
        _fail(f"invalid configuration: {e}")
        return
    if log_level:
        settings.monitoring.log_level = log_level
    configure_logging(settings.monitoring)
    ctx.obj["config"] = settings


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--marker", help="Substring that occurs once per record")
@click.option("--container-key", help="Key of the array that holds the records")
@click.option("--max-records", type=int, help="Maximum number of records to return")
@click.option("--workers", type=int, help="Threads used for per-record processing")
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "table"]),
    help="Output format",
)
@click.option("--report", is_flag=True, help="Print extraction statistics to stderr")
@click.pass_context
def extract(
    ctx: click.Context,
    source: Any,
    marker: Optional[str],
    container_key: Optional[str],
    max_records: Optional[int],
    workers: Optional[int],
    output_format: str,
    report: bool,
) -> None:
    """Extract records from a raw response read from SOURCE (default: stdin)."""
    settings: Config = ctx.obj["config"]
    overrides: Dict[str, Any] = {
        key: value
        for key, value in {
            "marker": marker,
            "container_key": container_key,
            "max_records": max_records,
            "workers": workers,
        }.items()
        if value is not None
    }
    try:
        extraction = settings.extraction.model_validate({**settings.extraction.model_dump(), **overrides})
        result = run_extraction(source.read(), extraction)
    except (ValidationError, ConfigurationError) as e:
        _fail(str(e))
        return

    _render_records(result.records, output_format, "Extracted records")
    if report:
        stats = {
            "spans": result.spans_seen,
            "accepted": 0 if result.used_fallback else len(result.records),
            "dropped_missing_title": result.dropped_missing_title,
            "dropped_language": result.dropped_language,
            "dropped_error": result.dropped_error,
            "used_fallback": result.used_fallback,
        }
        click.echo(json.dumps(stats), err=True)


@cli.command()
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["json", "table"]),
    help="Output format",
)
def fallback(output_format: str) -> None:
    """Show the built-in fallback catalog."""
    _render_records(fallback_catalog(), output_format, "Fallback catalog")


@cli.command()
@click.argument("categories", nargs=-1)
def genres(categories: List[str]) -> None:
    """Map CATEGORIES onto genres."""
    click.echo(json.dumps(GenreMapper().map_categories(categories)))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
