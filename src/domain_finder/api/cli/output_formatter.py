"""
Output formatting for the CLI.
"""

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from domain_finder.core.domain.models import Entry, EntryStatus, ProcessingStats

STATUS_STYLES = {
    EntryStatus.PENDING: "[dim]Pending[/dim]",
    EntryStatus.IN_FLIGHT: "[blue]In flight[/blue]",
    EntryStatus.DONE: "[green]Done[/green]",
    EntryStatus.FAILED: "[red]Failed[/red]",
}


def _truncate(text: str, width: int = 60) -> str:
    if len(text) > width:
        return text[: width - 3] + "..."
    return text


def render_results(console: Console, entries: Iterable[Entry]) -> None:
    """Print entries as a Rich table."""
    table = Table(title="Results")
    table.add_column("Company", style="cyan", no_wrap=True)
    table.add_column("Domain", style="green")
    table.add_column("Source", style="dim")
    table.add_column("Status")

    for entry in entries:
        if entry.status is EntryStatus.FAILED:
            domain = f"[red]{_truncate(entry.error_message or '')}[/red]"
        elif entry.status is EntryStatus.DONE and entry.domain is None:
            domain = "[yellow]Not found[/yellow]"
        else:
            domain = entry.domain or ""
        table.add_row(
            entry.original_name,
            domain,
            _truncate(entry.source_url or ""),
            STATUS_STYLES[entry.status],
        )

    console.print(table)


def render_stats(console: Console, stats: ProcessingStats) -> None:
    console.print(
        f"[bold]{stats.processed}/{stats.total}[/bold] processed "
        f"({stats.percent_complete}%) - "
        f"[green]{stats.completed} done[/green], "
        f"[red]{stats.failed} failed[/red], "
        f"[dim]{stats.pending} pending[/dim]"
    )
