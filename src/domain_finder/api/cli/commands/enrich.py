"""Enrich command - find domains for a list of companies."""

import asyncio
import signal
from collections.abc import Callable
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from domain_finder.api.cli.output_formatter import render_results, render_stats
from domain_finder.application.executor import EnrichmentExecutor
from domain_finder.config.logging_setup import configure_logging
from domain_finder.config.settings import FinderSettings
from domain_finder.core.domain.errors import ValidationError
from domain_finder.core.domain.models import ProgressUpdate, RunOutcome

console = Console()


async def _run_until_stopped(
    executor: EnrichmentExecutor,
    context: str,
    progress_callback: Callable[[ProgressUpdate], None],
) -> RunOutcome:
    """Run the executor; first Ctrl+C stops after the current group, second aborts."""
    loop = asyncio.get_running_loop()
    current = asyncio.current_task()
    stop_requested = False

    def on_interrupt() -> None:
        nonlocal stop_requested
        if stop_requested:
            console.print("[red]Aborting in-flight lookups[/red]")
            current.cancel()
            return
        stop_requested = True
        if executor.stop():
            console.print(
                "[yellow]Stopping after the current group (Ctrl+C again to abort)...[/yellow]"
            )

    try:
        loop.add_signal_handler(signal.SIGINT, on_interrupt)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        # Windows event loops and non-main threads
        handler_installed = False

    try:
        return await executor.run(context, progress_callback=progress_callback)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)


def enrich_command(
    ctx: typer.Context,
    input_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Text file, one company per line"
    ),
    context: str = typer.Option(
        ..., "--context", "-c", help="Trade show or event the companies attend"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="CSV export path (default: domain_results_<date>.csv)"
    ),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-n", min=1, help="Lookups per group"
    ),
    delay: Optional[float] = typer.Option(
        None, "--delay", min=0.0, help="Seconds to pause between groups"
    ),
    show_table: bool = typer.Option(True, "--table/--no-table", help="Print the results table"),
):
    """Find official website domains for every company in INPUT_FILE.

    Examples:
        # Enrich an exhibitor list
        domain-finder enrich exhibitors.txt --context "CES 2024"

        # Smaller groups, longer pauses, custom output
        domain-finder enrich list.txt -c "Hannover Messe" -n 2 --delay 2 -o out.csv
    """
    global_opts = ctx.obj or {}
    debug = global_opts.get("debug", False)
    settings = FinderSettings.load_from_file(
        global_opts.get("config_path", Path("domain_finder.yaml")),
        concurrency_limit=concurrency,
        group_delay_seconds=delay,
    )
    configure_logging("DEBUG" if debug else settings.log_level, settings.json_logs)

    executor = EnrichmentExecutor(settings=settings)
    total = executor.load_file(input_file)
    if total == 0:
        console.print(f"[red]Error: no company names found in {input_file}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[bold blue]Domain Finder[/bold blue] - {total} companies, context: [cyan]{context}[/cyan]"
    )

    aborted = False
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Finding domains...", total=total)

        def progress_callback(update: ProgressUpdate) -> None:
            if update.event_type == "entry_resolved":
                progress.advance(task)
            elif update.event_type == "group_dispatched" and debug:
                progress.update(task, description=update.message)

        try:
            outcome = asyncio.run(_run_until_stopped(executor, context, progress_callback))
        except ValidationError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        except asyncio.CancelledError:
            aborted = True
            outcome = None

    if show_table:
        render_results(console, executor.entries)
    render_stats(console, executor.stats())

    path = executor.export(output)
    console.print(f"Results written to [bold]{path}[/bold]")

    if aborted:
        console.print("[red]Run aborted[/red]")
        raise typer.Exit(130)
    if outcome.status == "cancelled":
        console.print("[yellow]Run stopped before all entries were processed[/yellow]")
