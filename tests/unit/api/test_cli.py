"""
CLI tests using typer's CliRunner with a mocked lookup client.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from domain_finder import __version__
from domain_finder.api.cli.main import app
from domain_finder.application.executor import EnrichmentExecutor
from domain_finder.core.domain.errors import LookupFailure
from domain_finder.core.domain.models import LookupResult

runner = CliRunner()


@pytest.fixture
def mock_lookup():
    async def lookup(name, context):
        if name == "Delta Co":
            raise LookupFailure("Service unavailable", name)
        if name == "Gamma Inc":
            return LookupResult(domain=None)
        return LookupResult(domain=f"https://{name.split()[0].lower()}.com")

    mock = MagicMock()
    mock.lookup = AsyncMock(side_effect=lookup)
    with patch("domain_finder.application.executor.create_lookup", return_value=mock):
        yield mock


@pytest.fixture
def input_file(tmp_path):
    path = tmp_path / "companies.txt"
    path.write_text("Acme Corp\nGamma Inc\n\nDelta Co\n", encoding="utf-8")
    return path


def invoke(tmp_path, *args):
    return runner.invoke(
        app, ["--config", str(tmp_path / "missing.yaml"), *args], catch_exceptions=False
    )


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_enrich_writes_export(tmp_path, input_file, mock_lookup):
    output = tmp_path / "results.csv"

    result = invoke(
        tmp_path, "enrich", str(input_file), "--context", "CES 2024",
        "--output", str(output), "--delay", "0", "--no-table",
    )

    assert result.exit_code == 0, result.output
    assert mock_lookup.lookup.await_count == 3
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Company Name,Domain,Source URL,Status,Error Message"
    assert lines[1] == "Acme Corp,https://acme.com,,DONE,"
    assert lines[2] == "Gamma Inc,,,DONE,"
    assert lines[3] == "Delta Co,,,FAILED,Service unavailable"
    assert "3/3" in result.output


def test_enrich_prints_results_table(tmp_path, input_file, mock_lookup):
    result = invoke(
        tmp_path, "enrich", str(input_file), "-c", "CES 2024",
        "-o", str(tmp_path / "out.csv"), "--delay", "0",
    )

    assert result.exit_code == 0, result.output
    assert "Acme Corp" in result.output
    assert "Not found" in result.output


def test_enrich_concurrency_option(tmp_path, input_file, mock_lookup):
    with patch(
        "domain_finder.api.cli.commands.enrich.EnrichmentExecutor",
        wraps=EnrichmentExecutor,
    ) as executor_cls:
        result = invoke(
            tmp_path, "enrich", str(input_file), "-c", "CES 2024",
            "-o", str(tmp_path / "out.csv"), "-n", "1", "--delay", "0", "--no-table",
        )

    assert result.exit_code == 0, result.output
    settings = executor_cls.call_args.kwargs["settings"]
    assert settings.concurrency_limit == 1
    assert settings.group_delay_seconds == 0


def test_enrich_requires_context_text(tmp_path, input_file, mock_lookup):
    result = invoke(
        tmp_path, "enrich", str(input_file), "--context", "  ",
        "-o", str(tmp_path / "out.csv"),
    )

    assert result.exit_code == 1
    assert "Context text is required" in result.output
    mock_lookup.lookup.assert_not_awaited()
    assert not (tmp_path / "out.csv").exists()


def test_enrich_empty_input(tmp_path, mock_lookup):
    empty = tmp_path / "empty.txt"
    empty.write_text("\n\n", encoding="utf-8")

    result = invoke(tmp_path, "enrich", str(empty), "--context", "CES 2024")

    assert result.exit_code == 1
    assert "no company names" in result.output
