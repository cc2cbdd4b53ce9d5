"""
Batch Controller

Drives every PENDING entry of an EntryStore to a terminal status with bounded
concurrency. The drain loop:

1. Claims up to ``concurrency_limit`` PENDING entries (select-and-mark in one
   atomic store call, original list order)
2. Dispatches one lookup per claimed entry concurrently
3. Applies each result to its own entry as soon as it resolves
4. Waits for the whole group, then pauses before the next one

Cancellation is cooperative: stop() only prevents the next group from
starting. Lookups already dispatched always run to completion and their
results are always applied, so no entry is left IN_FLIGHT.
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

import structlog

from domain_finder.core.domain.entry_store import EntryStore
from domain_finder.core.domain.errors import DomainFinderError, ValidationError
from domain_finder.core.domain.models import (
    Entry,
    EntryStatus,
    ProgressUpdate,
    RunContext,
    RunOutcome,
)
from domain_finder.core.interfaces.lookup import DomainLookupProtocol

logger = structlog.get_logger()

DEFAULT_CONCURRENCY_LIMIT = 5
DEFAULT_GROUP_DELAY_SECONDS = 0.5


class BatchController:
    """
    Cooperative batch processor for domain lookups.

    Owns the RunContext of the active run. Only one run may be active at a
    time per controller.
    """

    def __init__(
        self,
        store: EntryStore,
        lookup: DomainLookupProtocol,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        group_delay_seconds: float = DEFAULT_GROUP_DELAY_SECONDS,
        progress_callback: Callable[[ProgressUpdate], None] | None = None,
    ):
        """
        Initialize BatchController with injected dependencies.

        Args:
            store: Entry collection to drain
            lookup: Protocol performing one lookup per company name
            concurrency_limit: Default maximum group size (>= 1)
            group_delay_seconds: Pause between groups (>= 0)
            progress_callback: Optional callback receiving ProgressUpdate events
        """
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")
        if group_delay_seconds < 0:
            raise ValueError(f"group_delay_seconds must be >= 0, got {group_delay_seconds}")

        self.store = store
        self.lookup = lookup
        self.concurrency_limit = concurrency_limit
        self.group_delay_seconds = group_delay_seconds
        self.progress_callback = progress_callback
        self.logger = logger.bind(component="batch_controller")
        self._run: RunContext | None = None

    @property
    def run_context(self) -> RunContext | None:
        """Context of the active run, or None when idle."""
        return self._run

    @property
    def is_running(self) -> bool:
        return self._run is not None and self._run.is_running

    async def start(
        self, context_text: str, concurrency_limit: int | None = None
    ) -> RunOutcome:
        """
        Run the drain loop until no PENDING entries remain or stop() is called.

        Preconditions are checked before anything is mutated.

        Args:
            context_text: Event or show context shared by all lookups
            concurrency_limit: Override of the controller's default group size

        Returns:
            RunOutcome with status "completed" or "cancelled"

        Raises:
            ValidationError: If a run is already active, the context text is
                empty, the limit is below 1, or no entry is PENDING
        """
        limit = self.concurrency_limit if concurrency_limit is None else concurrency_limit
        self._validate_start(context_text, limit)

        run = RunContext(context_text=context_text.strip(), is_running=True)
        self._run = run
        self.store.run_active = True
        groups_dispatched = 0
        status = "completed"

        self.logger.info(
            "run.started",
            pending=self.store.stats().pending,
            concurrency_limit=limit,
            group_delay_seconds=self.group_delay_seconds,
        )
        self._emit(
            "run_started",
            f"Starting run for {context_text.strip()[:80]}",
            {"concurrency_limit": limit},
        )

        try:
            while True:
                group = self.store.claim_pending(limit)
                if not group:
                    break

                groups_dispatched += 1
                self.logger.info(
                    "group.dispatched", group=groups_dispatched, size=len(group)
                )
                self._emit(
                    "group_dispatched",
                    f"Group {groups_dispatched}: {len(group)} lookups",
                    {"group": groups_dispatched, "entry_ids": [e.id for e in group]},
                )

                try:
                    await asyncio.gather(*(self._resolve(entry, run) for entry in group))
                except asyncio.CancelledError:
                    # Hard abort of the run task, not stop()
                    self._fail_unresolved(group)
                    raise

                if not self.store.has_pending():
                    break
                if run.cancel_requested:
                    status = "cancelled"
                    break

                await self._pause()

                # stop() may arrive during the pause
                if run.cancel_requested:
                    status = "cancelled"
                    break
        finally:
            run.is_running = False
            self._run = None
            self.store.run_active = False

        stats = self.store.stats()
        self.logger.info(
            "run.finished",
            status=status,
            groups=groups_dispatched,
            completed=stats.completed,
            failed=stats.failed,
            pending=stats.pending,
        )
        self._emit(
            "run_finished",
            f"Run {status}: {stats.processed}/{stats.total} processed",
            {"status": status, "groups": groups_dispatched},
        )
        return RunOutcome(status=status, groups_dispatched=groups_dispatched, stats=stats)

    def stop(self) -> bool:
        """
        Request cooperative cancellation of the active run.

        In-flight lookups are not aborted; the current group finishes and no
        further group is started.

        Returns:
            True if a run was active and is now cancelling, False otherwise
        """
        if self._run is None or not self._run.is_running:
            self.logger.debug("stop.ignored", reason="no_active_run")
            return False
        if not self._run.cancel_requested:
            self._run.cancel_requested = True
            self.logger.info("run.cancel_requested")
        return True

    def _validate_start(self, context_text: str, limit: int) -> None:
        if self.is_running:
            raise ValidationError("A run is already in progress")
        if not context_text or not context_text.strip():
            raise ValidationError(
                "Context text is required",
                suggestion="Provide the trade show or event the companies attend",
            )
        if limit < 1:
            raise ValidationError(f"Concurrency limit must be at least 1, got {limit}")
        if not self.store.has_pending():
            raise ValidationError("There are no pending entries to process")

    async def _resolve(self, entry: Entry, run: RunContext) -> None:
        """Perform one lookup and apply its outcome to the entry. Never raises on lookup errors."""
        log = self.logger.bind(entry_id=entry.id, company=entry.original_name)
        try:
            result = await self.lookup.lookup(entry.original_name, run.context_text)
        except DomainFinderError as e:
            updated = self.store.mark_failed(entry.id, e.message)
            log.warning("entry.failed", error=e.message, error_type=type(e).__name__)
        except Exception as e:
            message = str(e) or "Unknown error"
            updated = self.store.mark_failed(entry.id, message)
            log.warning("entry.failed", error=message[:200], error_type=type(e).__name__)
        else:
            updated = self.store.mark_done(entry.id, result)
            log.info("entry.done", found=result.found)

        self._emit(
            "entry_resolved",
            f"{updated.original_name}: {updated.status.value}",
            {
                "entry_id": updated.id,
                "status": updated.status.value,
                "domain": updated.domain,
                "error": updated.error_message,
            },
        )

    def _fail_unresolved(self, group: list[Entry]) -> None:
        for entry in group:
            if self.store.get(entry.id).status is EntryStatus.IN_FLIGHT:
                self.store.mark_failed(entry.id, "Lookup aborted")
        self.logger.warning("run.aborted", group_size=len(group))

    async def _pause(self) -> None:
        """Yield to the event loop between groups."""
        await asyncio.sleep(self.group_delay_seconds)

    def _emit(self, event_type: str, message: str, details: dict[str, Any]) -> None:
        if not self.progress_callback:
            return
        try:
            self.progress_callback(
                ProgressUpdate(
                    timestamp=datetime.now(),
                    event_type=event_type,
                    message=message,
                    details=details,
                )
            )
        except Exception:
            self.logger.exception("progress_callback.failed", event_type=event_type)
