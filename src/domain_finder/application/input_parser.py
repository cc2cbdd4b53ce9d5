"""Parsing of user-supplied company lists."""

from pathlib import Path


def parse_company_names(content: str) -> list[str]:
    """
    Split plain text into company names, one per line.

    Surrounding whitespace is trimmed and blank lines are dropped. Order and
    duplicates are preserved.
    """
    return [line.strip() for line in content.splitlines() if line.strip()]


def read_company_names(path: Path) -> list[str]:
    # utf-8-sig drops the BOM spreadsheet tools like to add
    return parse_company_names(path.read_text(encoding="utf-8-sig"))
