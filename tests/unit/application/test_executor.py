"""
Unit Tests for EnrichmentExecutor

Tests the service layer with a mocked lookup protocol.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from domain_finder.application.executor import EnrichmentExecutor
from domain_finder.config.settings import FinderSettings
from domain_finder.core.domain.errors import ValidationError
from domain_finder.core.domain.models import EntryStatus, LookupResult
from domain_finder.infrastructure.llm.gemini_lookup import GeminiDomainLookup


@pytest.fixture
def settings():
    return FinderSettings(concurrency_limit=2, group_delay_seconds=0)


@pytest.fixture
def mock_lookup():
    mock = MagicMock()
    mock.lookup = AsyncMock(return_value=LookupResult(domain="https://example.com"))
    return mock


@pytest.fixture
def executor(settings, mock_lookup):
    return EnrichmentExecutor(settings=settings, lookup=mock_lookup)


def test_builds_gemini_lookup_from_settings(settings):
    executor = EnrichmentExecutor(settings=settings)

    assert isinstance(executor.lookup, GeminiDomainLookup)
    assert executor.controller.concurrency_limit == 2
    assert executor.controller.group_delay_seconds == 0


def test_load_file(executor, tmp_path):
    path = tmp_path / "companies.txt"
    path.write_text("Acme Corp\n\nBeta LLC\n", encoding="utf-8")

    assert executor.load_file(path) == 2
    assert [e.original_name for e in executor.entries] == ["Acme Corp", "Beta LLC"]


@pytest.mark.asyncio
async def test_run_uses_configured_limit(executor, mock_lookup):
    executor.load_names(["A", "B", "C"])

    outcome = await executor.run("CES 2024")

    assert outcome.status == "completed"
    assert outcome.groups_dispatched == 2
    assert executor.stats().completed == 3
    assert mock_lookup.lookup.await_count == 3


@pytest.mark.asyncio
async def test_run_limit_override(executor):
    executor.load_names(["A", "B", "C"])

    outcome = await executor.run("CES 2024", concurrency_limit=5)

    assert outcome.groups_dispatched == 1


@pytest.mark.asyncio
async def test_progress_callback_is_scoped_to_run(executor):
    executor.load_names(["A"])
    updates = []

    await executor.run("CES 2024", progress_callback=updates.append)

    assert updates
    assert executor.controller.progress_callback is None


@pytest.mark.asyncio
async def test_run_without_context_rejected(executor):
    executor.load_names(["A"])

    with pytest.raises(ValidationError):
        await executor.run("")

    assert executor.entries[0].status is EntryStatus.PENDING


@pytest.mark.asyncio
async def test_clear_processed_and_export(executor, tmp_path):
    executor.load_names(["A", "B"])
    await executor.run("CES 2024")

    path = executor.export(tmp_path / "results.csv")
    assert path.read_text(encoding="utf-8").count("https://example.com") == 2

    assert executor.clear_processed() == 2
    assert executor.entries == ()


def test_export_default_path(executor, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    executor.load_names(["A"])

    with patch(
        "domain_finder.application.executor.default_export_filename",
        return_value="domain_results_2024-01-09.csv",
    ):
        path = executor.export()

    assert path.name == "domain_results_2024-01-09.csv"
    assert (tmp_path / path).exists()


def test_stop_without_run(executor):
    assert executor.stop() is False
    assert executor.is_running is False


@pytest.mark.asyncio
async def test_load_names_refused_between_groups(executor):
    executor.load_names(["A", "B", "C", "D"])
    errors = []

    async def pause():
        try:
            executor.load_names(["Intruder"])
        except ValidationError as e:
            errors.append(e)

    with patch.object(executor.controller, "_pause", AsyncMock(side_effect=pause)):
        outcome = await executor.run("CES 2024")

    assert len(errors) == 1
    assert outcome.status == "completed"
    assert [e.original_name for e in executor.entries] == ["A", "B", "C", "D"]
    assert all(e.status is EntryStatus.DONE for e in executor.entries)


@pytest.mark.asyncio
async def test_clear_processed_refused_between_groups(executor):
    executor.load_names(["A", "B", "C"])
    errors = []

    async def pause():
        try:
            executor.clear_processed()
        except ValidationError as e:
            errors.append(e)

    with patch.object(executor.controller, "_pause", AsyncMock(side_effect=pause)):
        await executor.run("CES 2024")

    assert len(errors) == 1
    assert len(executor.entries) == 3
    assert executor.clear_processed() == 3


@pytest.mark.asyncio
async def test_load_names_allowed_after_run(executor):
    executor.load_names(["A"])
    await executor.run("CES 2024")

    assert executor.load_names(["B", "C"]) == 2
    assert executor.store.run_active is False
