"""
CSV export of enrichment results.

Output columns: Company Name, Domain, Source URL, Status, Error Message.
Fields containing a comma, a double quote or a line break are quoted, with
embedded quotes doubled. Records end with ``\\n``. The output depends only on
the entries passed in, so exporting the same collection twice gives identical
bytes.
"""

import csv
import io
from collections.abc import Iterable
from datetime import date
from pathlib import Path

import structlog

from domain_finder.core.domain.models import Entry

logger = structlog.get_logger()

EXPORT_HEADERS = ["Company Name", "Domain", "Source URL", "Status", "Error Message"]


def default_export_filename(on: date | None = None) -> str:
    return f"domain_results_{(on or date.today()).isoformat()}.csv"


def export_entries(entries: Iterable[Entry]) -> str:
    """Render entries as CSV text with a single header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for entry in entries:
        writer.writerow(
            [
                entry.original_name,
                entry.domain or "",
                entry.source_url or "",
                entry.status.value,
                entry.error_message or "",
            ]
        )
    return buffer.getvalue()


def write_export(entries: Iterable[Entry], path: Path) -> Path:
    """
    Write the CSV export to ``path``, creating parent directories.

    Returns:
        The path written
    """
    entries = list(entries)
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the writer's \n terminators untranslated on every platform
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(export_entries(entries))
    logger.info("export.written", path=str(path), rows=len(entries))
    return path
