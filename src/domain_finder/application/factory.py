"""
Factory functions assembling the enrichment stack from settings.

Keeps construction details out of the CLI so every entrypoint builds the
lookup client and controller the same way.
"""

from collections.abc import Callable

import structlog

from domain_finder.config.settings import FinderSettings
from domain_finder.core.domain.controller import BatchController
from domain_finder.core.domain.entry_store import EntryStore
from domain_finder.core.domain.models import ProgressUpdate
from domain_finder.core.interfaces.lookup import DomainLookupProtocol
from domain_finder.infrastructure.llm.gemini_lookup import GeminiDomainLookup

logger = structlog.get_logger()


def create_lookup(settings: FinderSettings) -> DomainLookupProtocol:
    """Create the lookup client configured by ``settings``."""
    logger.debug("lookup.created", model=settings.model, api_key_env=settings.api_key_env)
    return GeminiDomainLookup.from_settings(settings)


def create_controller(
    store: EntryStore,
    lookup: DomainLookupProtocol,
    settings: FinderSettings,
    progress_callback: Callable[[ProgressUpdate], None] | None = None,
) -> BatchController:
    return BatchController(
        store=store,
        lookup=lookup,
        concurrency_limit=settings.concurrency_limit,
        group_delay_seconds=settings.group_delay_seconds,
        progress_callback=progress_callback,
    )
