"""
Upload Intake - Company Scoring Platform
app/services/intake.py

Turns an uploaded CSV into the ordered, de-duplicated list of company names
a run is created from.

Rules:
  - If the first row carries a recognised header (name, company, company name,
    company_name, companies, organization), that row is skipped and the
    matching column is read. Otherwise the first column of every row is read.
  - Surrounding whitespace and quotes are stripped; blank cells are dropped.
  - Duplicates are removed case-insensitively, keeping the first occurrence.
"""

import csv
import io
import logging
from typing import Iterable, List, Union

from app.core.exceptions import IntakeException

logger = logging.getLogger(__name__)

HEADER_LABELS = {"name", "company", "company name", "company_name", "companies", "organization"}


def _clean(cell: str) -> str:
    return cell.strip().strip('"').strip("'").strip()


def dedupe_names(names: Iterable[str]) -> List[str]:
    """Ordered, case-insensitive de-duplication of non-blank names."""
    seen = set()
    result = []
    for raw in names:
        name = _clean(raw or "")
        if not name:
            continue
        key = name.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(name)
    return result


def parse_company_csv(content: Union[bytes, str]) -> List[str]:
    """
    Parse an uploaded CSV into company names.

    Args:
        content: Raw upload body (bytes are decoded as UTF-8, BOM tolerated)

    Returns:
        Ordered unique names; empty when the file holds no names.

    Raises:
        IntakeException: the upload is not UTF-8 text
    """
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise IntakeException("Upload must be a UTF-8 encoded CSV file")
    else:
        text = content.lstrip("\ufeff")

    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if not rows:
        return []

    column = 0
    header = [_clean(cell).casefold() for cell in rows[0]]
    for index, label in enumerate(header):
        if label in HEADER_LABELS:
            column = index
            rows = rows[1:]
            break

    names = dedupe_names(row[column] if column < len(row) else "" for row in rows)
    logger.info("Parsed %d company name(s) from upload (%d row(s))", len(names), len(rows))
    return names
