"""
Entry Store

Holds the ordered collection of entries and enforces their lifecycle:

    PENDING -> IN_FLIGHT -> DONE | FAILED

All methods are synchronous and never suspend, so on a single event loop each
call is atomic with respect to every coroutine. Every mutation replaces the
whole collection with a new tuple in which only the targeted entry differs,
which keeps concurrent result application order-independent.
"""

import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace

import structlog

from domain_finder.core.domain.errors import InvalidTransitionError, ValidationError
from domain_finder.core.domain.models import (
    Entry,
    EntryStatus,
    LookupResult,
    ProcessingStats,
)

logger = structlog.get_logger()


def _generate_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex}"


class EntryStore:
    """Ordered, id-keyed collection of entries."""

    def __init__(self, entries: Iterable[Entry] = ()):
        self._entries: tuple[Entry, ...] = ()
        self._set_entries(tuple(entries))
        # Set by the batch controller for the duration of a run
        self.run_active = False
        self.logger = logger.bind(component="entry_store")

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "EntryStore":
        """Create a store with one PENDING entry per name, in the given order."""
        return cls(Entry(id=_generate_entry_id(), original_name=name) for name in names)

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Immutable snapshot of all entries in original order."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Entry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise KeyError(entry_id)

    def has_pending(self) -> bool:
        return any(e.status is EntryStatus.PENDING for e in self._entries)

    def load_names(self, names: Iterable[str]) -> None:
        """
        Replace every entry with fresh PENDING entries for ``names``.

        Raises:
            ValidationError: If a run is active or any entry is still IN_FLIGHT
        """
        if self.run_active or any(e.status is EntryStatus.IN_FLIGHT for e in self._entries):
            raise ValidationError(
                "Cannot load new entries during an active run",
                suggestion="Stop the current run and wait for it to finish",
            )
        self._set_entries(
            tuple(Entry(id=_generate_entry_id(), original_name=name) for name in names)
        )
        self.logger.info("store.loaded", count=len(self._entries))

    def claim_pending(self, limit: int) -> list[Entry]:
        """
        Select up to ``limit`` PENDING entries in original order and mark them IN_FLIGHT.

        Selection and marking happen in one step, so an entry can never be
        claimed twice.

        Args:
            limit: Maximum number of entries to claim (must be >= 1)

        Returns:
            The claimed entries, already in IN_FLIGHT status. Empty when
            nothing is pending.
        """
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")

        claimed: list[Entry] = []
        updated: list[Entry] = []
        for entry in self._entries:
            if entry.status is EntryStatus.PENDING and len(claimed) < limit:
                entry = replace(entry, status=EntryStatus.IN_FLIGHT)
                claimed.append(entry)
            updated.append(entry)

        if claimed:
            self._entries = tuple(updated)
        return claimed

    def mark_done(self, entry_id: str, result: LookupResult) -> Entry:
        """Resolve an IN_FLIGHT entry as DONE with the lookup result."""
        return self._transition(
            entry_id,
            lambda e: replace(
                e,
                status=EntryStatus.DONE,
                domain=result.domain,
                source_url=result.source_url,
                error_message=None,
            ),
        )

    def mark_failed(self, entry_id: str, message: str) -> Entry:
        """Resolve an IN_FLIGHT entry as FAILED, keeping the failure message."""
        return self._transition(
            entry_id,
            lambda e: replace(
                e,
                status=EntryStatus.FAILED,
                domain=None,
                source_url=None,
                error_message=message or "Unknown error",
            ),
        )

    def stats(self) -> ProcessingStats:
        counts = {status: 0 for status in EntryStatus}
        for entry in self._entries:
            counts[entry.status] += 1
        return ProcessingStats(
            total=len(self._entries),
            completed=counts[EntryStatus.DONE],
            failed=counts[EntryStatus.FAILED],
            pending=counts[EntryStatus.PENDING],
            in_progress=counts[EntryStatus.IN_FLIGHT],
        )

    def clear_processed(self) -> int:
        """
        Remove every DONE and FAILED entry.

        Returns:
            Number of entries removed

        Raises:
            ValidationError: If a run is active
        """
        if self.run_active:
            raise ValidationError(
                "Cannot clear entries while a run is active",
                suggestion="Stop the current run and wait for it to finish",
            )
        kept = tuple(e for e in self._entries if not e.status.is_terminal)
        removed = len(self._entries) - len(kept)
        self._entries = kept
        if removed:
            self.logger.info("store.cleared", removed=removed, remaining=len(kept))
        return removed

    def _transition(self, entry_id: str, update: Callable[[Entry], Entry]) -> Entry:
        current = self.get(entry_id)
        if current.status is not EntryStatus.IN_FLIGHT:
            raise InvalidTransitionError(
                f"Entry {entry_id} is {current.status.value}, expected IN_FLIGHT"
            )
        updated = update(current)
        self._entries = tuple(updated if e.id == entry_id else e for e in self._entries)
        return updated

    def _set_entries(self, entries: tuple[Entry, ...]) -> None:
        ids = [e.id for e in entries]
        if len(set(ids)) != len(ids):
            raise ValueError("Entry ids must be unique")
        self._entries = entries
