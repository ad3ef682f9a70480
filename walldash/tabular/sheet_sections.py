"""Sectioning of published spreadsheet exports.

The maintenance sheet stacks one block per vehicle: a title row whose first
cell names the vehicle and whose remaining cells name the tracked services,
followed by dated history rows. Blocks are recovered from row shape alone.
"""

import logging
import re
from datetime import date
from typing import Any, Optional

from walldash.models import ServiceStatus, SheetSection
from walldash.tabular.dates import parse_generic_date
from walldash.tabular.tokenizer import is_blank_row, tokenize

logger = logging.getLogger(__name__)

# m/d/yy or m/d/yyyy at the start of a cell
DATE_LIKE_PATTERN = re.compile(r"^\d{1,2}/\d{1,2}/(\d{2}|\d{4})")

# Average month length used for service intervals
DAYS_PER_MONTH = 30.44


def is_section_header(row: list[str]) -> bool:
    """Return True when the row opens a new section.

    A header row has a non-date first cell and a non-empty second cell.
    """
    first_cell = row[0].strip() if row else ""
    if DATE_LIKE_PATTERN.match(first_cell):
        return False
    return len(row) > 1 and row[1].strip() != ""


def sort_rows_newest_first(rows: list[list[str]]) -> list[list[str]]:
    """Sort rows descending by the date in their first cell.

    Rows whose first cell is not a date go last, in source order. Rows with
    equal dates also keep source order.
    """
    dated: list[tuple[date, list[str]]] = []
    undated: list[list[str]] = []
    for row in rows:
        row_date = parse_generic_date(row[0]) if row else None
        if row_date is None:
            undated.append(row)
        else:
            dated.append((row_date, row))

    dated.sort(key=lambda item: item[0], reverse=True)
    return [row for _, row in dated] + undated


def _finalize(title: str, headers: list[str], rows: list[list[str]]) -> SheetSection:
    ordered = sort_rows_newest_first(rows)
    return SheetSection(
        title=title,
        headers=tuple(headers),
        rows=tuple(tuple(row) for row in ordered),
    )


def extract_sections(text: str) -> list[SheetSection]:
    """Split a spreadsheet CSV export into titled, date-sorted sections.

    Never raises on malformed input; data rows seen before the first
    section header are discarded.

    Args:
        text: Raw CSV text of the published sheet

    Returns:
        Sections in order of first appearance
    """
    sections: list[SheetSection] = []
    current: Optional[tuple[str, list[str], list[list[str]]]] = None
    orphaned = 0

    for row in tokenize(text):
        if is_blank_row(row):
            continue

        if is_section_header(row):
            if current is not None:
                sections.append(_finalize(*current))
            headers = [cell.strip() for cell in row[1:] if cell.strip()]
            current = (row[0].strip(), headers, [])
        elif current is not None:
            current[2].append([cell.strip() for cell in row])
        else:
            orphaned += 1

    if current is not None:
        sections.append(_finalize(*current))

    if orphaned:
        logger.debug("Discarded %d rows that appeared before any section header", orphaned)
    logger.info("Extracted %d sheet sections", len(sections))
    return sections


def find_header(section: SheetSection, keyword: str) -> Optional[int]:
    """Return the index of the first header containing keyword, case-insensitively."""
    needle = keyword.lower()
    for index, header in enumerate(section.headers):
        if needle in header.lower():
            return index
    return None


def latest_entry(section: SheetSection, keyword: str) -> Optional[tuple[str, ...]]:
    """Return the newest row with a value under the header matching keyword.

    Header index i lines up with row cell i + 1, since cell 0 holds the date.
    """
    header_index = find_header(section, keyword)
    if header_index is None:
        return None
    cell_index = header_index + 1
    for row in section.rows:
        if cell_index < len(row) and row[cell_index] != "":
            return row
    return None


def is_service_overdue(date_text: str, today: date, months: int = 6) -> bool:
    """Return True when the service dated date_text is more than months old.

    Unparseable dates are never overdue.
    """
    service_date = parse_generic_date(date_text)
    if service_date is None:
        return False
    age_months = (today - service_date).days / DAYS_PER_MONTH
    return age_months > months


def recent_history(section: SheetSection, limit: int = 3) -> list[dict[str, Any]]:
    """Summarize the newest rows of a section as date/details pairs."""
    return [
        {"date": row[0] if row else "", "details": list(row[1:])}
        for row in section.rows[:limit]
    ]


def service_status(
    section: SheetSection, keyword: str, today: date, months: int = 6
) -> ServiceStatus:
    """Summarize a section's latest service matching keyword and whether it is due.

    Sections without a matching header are reported as untracked and never
    overdue.
    """
    row = latest_entry(section, keyword)
    last_service = row[0] if row else None
    return ServiceStatus(
        title=section.title,
        service=keyword,
        tracked=find_header(section, keyword) is not None,
        last_service=last_service,
        overdue=is_service_overdue(last_service, today, months) if last_service else False,
        history=recent_history(section),
    )
