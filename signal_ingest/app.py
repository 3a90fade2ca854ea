"""Typer CLI entrypoint for signal-ingest."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import ConfigRepository, IngestConfig
from .engine import Fetcher, build_feed_url
from .engine.exporter import BaseExporter, FileExporter, RestStoreExporter
from .errors import ConfigError
from .logging_conf import configure_logging, error_log_path, ingest_log_path, tail_log
from .orchestrator import Orchestrator, RunSummary

app = typer.Typer(
    help="News signal ingestion job",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect ingestion logs",
    no_args_is_help=True,
    rich_markup_mode=None,
)
app.add_typer(log_app, name="log")

console = Console()

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to a YAML/JSON ingest configuration (defaults to data/ingest_config.yaml).",
    dir_okay=False,
)


@dataclass
class AppState:
    repository: ConfigRepository
    verbose: bool = False


def build_state(verbose: bool) -> AppState:
    configure_logging(verbose=verbose)
    return AppState(repository=ConfigRepository(), verbose=verbose)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def build_orchestrator(
    repository: ConfigRepository, config: IngestConfig, dry_run: bool = False
) -> Orchestrator:
    """Assemble the pipeline; raises ConfigError before any network client exists."""

    exporter: BaseExporter
    if dry_run:
        exporter = FileExporter(repository.locator.outputs_dir)
    else:
        api_key = repository.load_credentials(config)
        exporter = RestStoreExporter(config.store, api_key)
    return Orchestrator(config=config, fetcher=Fetcher(config), exporter=exporter)


def _render_summary(summary: RunSummary) -> Table:
    table = Table(title="Ingestion summary", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("metric", style="cyan", no_wrap=True)
    table.add_column("value", style="green")
    table.add_row("cleanup", summary.prune_result or f"failed: {summary.prune_error}")
    table.add_row("queries", f"{summary.queries} ({len(summary.failed_queries)} failed)")
    table.add_row("items fetched", str(summary.fetched))
    table.add_row("unique items", str(summary.unique))
    table.add_row("batches", f"{len(summary.batches)} ({summary.failed_batches} failed)")
    table.add_row("new signals", str(summary.inserted))
    table.add_row("duplicates skipped", str(summary.skipped))
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    ctx.obj = build_state(verbose)


@app.command("run", help="Prune stale signals, fetch every query and store new items.")
def run(
    ctx: typer.Context,
    config_path: Optional[Path] = ConfigOption,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Write items to data/outputs instead of the remote store."
    ),
) -> None:
    state = _get_state(ctx)
    try:
        config = state.repository.load_config(config_path)
        orchestrator = build_orchestrator(state.repository, config, dry_run=dry_run)
    except ConfigError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1)
    try:
        summary = orchestrator.run()
    finally:
        orchestrator.close()
    console.print(_render_summary(summary))


@app.command("queries", help="List configured search queries and their feed URLs.")
def queries(ctx: typer.Context, config_path: Optional[Path] = ConfigOption) -> None:
    state = _get_state(ctx)
    try:
        config = state.repository.load_config(config_path)
    except ConfigError as exc:
        console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1)
    table = Table(title=f"Queries · {len(config.queries)}", box=box.SIMPLE_HEAD)
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("query", style="cyan", overflow="fold")
    table.add_column("feed url", style="magenta", overflow="fold")
    for index, query in enumerate(config.queries, start=1):
        table.add_row(str(index), query, build_feed_url(query, config.feed))
    console.print(table)


@log_app.command("show", help="Print the tail of the ingest (or error) log.")
def log_show(
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines to show."),
    errors: bool = typer.Option(False, "--errors", help="Show the error log instead."),
) -> None:
    path = error_log_path() if errors else ingest_log_path()
    content = tail_log(path, lines)
    if not content:
        console.print(f"No log entries in {path}", style="yellow")
        return
    for line in content:
        console.print(line.rstrip("\n"), markup=False, highlight=False)


def cli() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    cli()
