"""
Core Domain Models

This module defines the data models used throughout the enrichment domain:
the work item (Entry) and its lifecycle status, the result of one lookup,
the per-run control state, and the aggregate statistics shown to users.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class EntryStatus(str, Enum):
    """Lifecycle status of an entry."""

    PENDING = "PENDING"
    IN_FLIGHT = "IN_FLIGHT"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (EntryStatus.DONE, EntryStatus.FAILED)


@dataclass(frozen=True)
class Entry:
    """
    One company name and its enrichment outcome.

    Entries are immutable; the store replaces an entry with an updated copy
    whenever its status changes, keyed by ``id``.

    Attributes:
        id: Opaque unique identifier, stable for the life of the entry
        original_name: Company name as supplied by the user
        domain: Official website URL, or None when not (yet) found
        source_url: First web citation backing the domain, if any
        status: Current lifecycle status
        error_message: Failure cause (only set when status is FAILED)
    """

    id: str
    original_name: str
    domain: str | None = None
    source_url: str | None = None
    status: EntryStatus = EntryStatus.PENDING
    error_message: str | None = None


@dataclass(frozen=True)
class LookupResult:
    """
    Outcome of a successful lookup.

    A ``domain`` of None means the service explicitly reported that no
    official site could be found. That is a valid result, not a failure.
    """

    domain: str | None = None
    source_url: str | None = None

    @property
    def found(self) -> bool:
        return self.domain is not None


@dataclass
class RunContext:
    """
    Control state of one run of the batch controller.

    Created when a run starts and discarded when it completes or stops.
    The drain loop polls ``cancel_requested`` between groups.

    Attributes:
        context_text: Event or show context shared by every lookup in the run
        is_running: True while the drain loop is active
        cancel_requested: Set by stop(); prevents further groups from starting
    """

    context_text: str
    is_running: bool = False
    cancel_requested: bool = False


@dataclass(frozen=True)
class ProcessingStats:
    """Entry counts by status."""

    total: int = 0
    completed: int = 0
    failed: int = 0
    pending: int = 0
    in_progress: int = 0

    @property
    def processed(self) -> int:
        return self.completed + self.failed

    @property
    def percent_complete(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.processed / self.total * 100, 1)


@dataclass
class ProgressUpdate:
    """Progress update during a run.

    Emitted by the batch controller so the presentation layer can repaint.

    Attributes:
        timestamp: When this update occurred
        event_type: One of run_started, group_dispatched, entry_resolved, run_finished
        message: Human-readable description of the event
        details: Additional structured data about the event
    """

    timestamp: datetime
    event_type: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class RunOutcome:
    """
    Result of one run of the batch controller.

    Attributes:
        status: "completed" when no pending entries remain, "cancelled" when stopped
        groups_dispatched: Number of groups dispatched during the run
        stats: Entry counts when the run finished
    """

    status: str
    groups_dispatched: int
    stats: ProcessingStats
