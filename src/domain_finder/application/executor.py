"""
Application Layer - Enrichment Executor

Service layer used by presentation entrypoints. It owns one entry store and
one batch controller and exposes the user-facing operations:

- load a company list (from text or a file)
- run enrichment with progress callbacks
- request a cooperative stop
- clear processed entries
- export results to CSV
"""

from collections.abc import Callable, Iterable
from datetime import datetime
from pathlib import Path

import structlog

from domain_finder.application.csv_export import default_export_filename, write_export
from domain_finder.application.factory import create_controller, create_lookup
from domain_finder.application.input_parser import read_company_names
from domain_finder.config.settings import FinderSettings
from domain_finder.core.domain.entry_store import EntryStore
from domain_finder.core.domain.errors import ValidationError
from domain_finder.core.domain.models import (
    Entry,
    ProcessingStats,
    ProgressUpdate,
    RunOutcome,
)
from domain_finder.core.interfaces.lookup import DomainLookupProtocol

logger = structlog.get_logger()


class EnrichmentExecutor:
    """Service layer orchestrating enrichment runs.

    Decouples the domain (store + controller) from the presentation layer so
    every interface drives runs the same way.
    """

    def __init__(
        self,
        settings: FinderSettings | None = None,
        lookup: DomainLookupProtocol | None = None,
        store: EntryStore | None = None,
    ):
        """Initialize EnrichmentExecutor.

        Args:
            settings: Optional settings; defaults are loaded from the environment
            lookup: Optional lookup client; built from settings when omitted
            store: Optional pre-populated entry store
        """
        self.settings = settings or FinderSettings()
        self.lookup = lookup or create_lookup(self.settings)
        self.store = store or EntryStore()
        self.controller = create_controller(self.store, self.lookup, self.settings)
        self.logger = logger.bind(component="enrichment_executor")

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self.store.entries

    @property
    def is_running(self) -> bool:
        return self.controller.is_running

    def load_names(self, names: Iterable[str]) -> int:
        """Replace the entry set with one PENDING entry per name.

        Raises:
            ValidationError: If a run is active
        """
        self._ensure_idle("load new entries")
        self.store.load_names(names)
        return len(self.store)

    def load_file(self, path: Path) -> int:
        count = self.load_names(read_company_names(path))
        self.logger.info("input.loaded", path=str(path), entries=count)
        return count

    async def run(
        self,
        context_text: str,
        concurrency_limit: int | None = None,
        progress_callback: Callable[[ProgressUpdate], None] | None = None,
    ) -> RunOutcome:
        """Drain all pending entries.

        Args:
            context_text: Event or show context for every lookup
            concurrency_limit: Optional override of the configured group size
            progress_callback: Optional callback for progress updates

        Returns:
            RunOutcome from the batch controller

        Raises:
            ValidationError: If the run preconditions are not met
        """
        start_time = datetime.now()
        previous_callback = self.controller.progress_callback
        self.controller.progress_callback = progress_callback
        try:
            outcome = await self.controller.start(context_text, concurrency_limit)
        finally:
            self.controller.progress_callback = previous_callback

        self.logger.info(
            "enrichment.finished",
            status=outcome.status,
            groups=outcome.groups_dispatched,
            duration_seconds=(datetime.now() - start_time).total_seconds(),
        )
        return outcome

    def stop(self) -> bool:
        return self.controller.stop()

    def stats(self) -> ProcessingStats:
        return self.store.stats()

    def clear_processed(self) -> int:
        self._ensure_idle("clear processed entries")
        return self.store.clear_processed()

    def export(self, path: Path | None = None) -> Path:
        """Write all entries as CSV; defaults to ``domain_results_<date>.csv`` in the cwd."""
        return write_export(self.store.entries, path or Path(default_export_filename()))

    def _ensure_idle(self, action: str) -> None:
        if self.controller.is_running:
            raise ValidationError(
                f"Cannot {action} while a run is active",
                suggestion="Stop the current run and wait for it to finish",
            )
