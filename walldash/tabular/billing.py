"""Energy bill CSV extraction.

Utility exports open with a few metadata lines (account, address, meter)
before the real header. The header is found by shape, columns are resolved
by fuzzy name matching, and every billing line item becomes one
BillingRecord keyed by the end date of its billing period.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from walldash.exceptions import (
    BillingColumnsMissingError,
    BillingHeaderNotFoundError,
    BillingNoRecordsError,
)
from walldash.models import BillingRecord
from walldash.tabular.dates import parse_cell_date
from walldash.tabular.tokenizer import is_blank_row, tokenize

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


@dataclass(frozen=True)
class BillingColumns:
    """Column indices resolved from the bill header row."""

    end_date: int
    import_kwh: int
    type: Optional[int] = None
    start_date: Optional[int] = None
    export_kwh: Optional[int] = None
    cost: Optional[int] = None

    @property
    def min_row_length(self) -> int:
        """Fewest fields a data row needs to reach every required column."""
        return max(self.end_date, self.import_kwh) + 1


def clean_cell(cell: str) -> str:
    """Strip surrounding whitespace and stray wrapping quotes from a cell."""
    return cell.strip().strip('"').strip()


def normalize_header(row: list[str]) -> list[str]:
    """Normalize header cells for matching: unquoted, trimmed and lowercased."""
    return [clean_cell(cell).lower() for cell in row]


def is_header_row(normalized: list[str]) -> bool:
    """Return True when the row has a TYPE cell and a START DATE or END DATE cell."""
    if "type" not in normalized:
        return False
    return any("start date" in cell or "end date" in cell for cell in normalized)


def find_header_row(rows: list[list[str]]) -> Optional[int]:
    """Return the index of the first row that looks like the bill header."""
    for index, row in enumerate(rows):
        if is_header_row(normalize_header(row)):
            return index
    return None


def _first_index(cells: list[str], predicate) -> Optional[int]:
    for index, cell in enumerate(cells):
        if predicate(cell):
            return index
    return None


def resolve_columns(header: list[str]) -> BillingColumns:
    """Resolve column positions from normalized header cells.

    Each column is matched independently, so source column order is irrelevant.

    Raises:
        BillingColumnsMissingError: If END DATE or IMPORT (kWh) cannot be found
    """
    end_date = _first_index(header, lambda cell: "end date" in cell)
    import_kwh = _first_index(header, lambda cell: "import" in cell and "kwh" in cell)

    missing = []
    if end_date is None:
        missing.append("END DATE")
    if import_kwh is None:
        missing.append("IMPORT (kWh)")
    if end_date is None or import_kwh is None:
        raise BillingColumnsMissingError(missing, header)

    return BillingColumns(
        end_date=end_date,
        import_kwh=import_kwh,
        type=_first_index(header, lambda cell: cell == "type"),
        start_date=_first_index(header, lambda cell: "start date" in cell),
        export_kwh=_first_index(header, lambda cell: "export" in cell and "kwh" in cell),
        cost=_first_index(header, lambda cell: cell == "cost"),
    )


def parse_number(text: str) -> Optional[float]:
    """Parse a numeric cell after dropping everything but digits, "." and "-".

    Currency symbols and thousands separators disappear with the stripping.
    The longest leading number is used, so "12.5.1" reads as 12.5.

    Returns:
        The parsed value, or None when no number is present
    """
    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", text))
    if match is None:
        return None
    return float(match.group(0))


def _cell(row: list[str], index: Optional[int]) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index]


def _is_billing_line(row: list[str], columns: BillingColumns) -> bool:
    if columns.type is None:
        return True
    type_cell = _cell(row, columns.type)
    return not type_cell or "billing" in type_cell.lower()


def _record_from_row(row: list[str], columns: BillingColumns) -> Optional[BillingRecord]:
    period_end = parse_cell_date(_cell(row, columns.end_date))
    if period_end is None:
        logger.debug("Dropping bill row with unparseable end date: %r", row)
        return None

    import_kwh = parse_number(_cell(row, columns.import_kwh)) or 0.0
    export_kwh = parse_number(_cell(row, columns.export_kwh)) or 0.0
    net_kwh = import_kwh - export_kwh
    # Export exceeding import reports the raw import instead of a non-positive net
    usage_kwh = net_kwh if net_kwh > 0 else import_kwh

    cost = parse_number(_cell(row, columns.cost)) if columns.cost is not None else None

    return BillingRecord(date=period_end, usage_kwh=usage_kwh, cost=cost)


def extract_billing_records(text: str) -> list[BillingRecord]:
    """Extract billing records from an energy bill CSV export.

    Records are returned in source order without deduplication; callers
    persisting them should upsert by date.

    Args:
        text: Raw CSV text of the bill export

    Returns:
        One record per billing line item with a parseable end date

    Raises:
        BillingHeaderNotFoundError: If no header row is found
        BillingColumnsMissingError: If END DATE or IMPORT (kWh) is missing
        BillingNoRecordsError: If no data row yields a record
    """
    rows = [[clean_cell(cell) for cell in row] for row in tokenize(text) if not is_blank_row(row)]

    header_index = find_header_row(rows)
    if header_index is None:
        raise BillingHeaderNotFoundError(len(rows))

    header = normalize_header(rows[header_index])
    columns = resolve_columns(header)
    logger.debug("Bill header at row %d resolved to %s", header_index, columns)

    data_rows = rows[header_index + 1 :]
    records: list[BillingRecord] = []
    skipped = 0
    for row in data_rows:
        if len(row) < columns.min_row_length or not _is_billing_line(row, columns):
            skipped += 1
            continue
        record = _record_from_row(row, columns)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if not records:
        raise BillingNoRecordsError(len(data_rows))

    logger.info("Extracted %d billing records (%d rows skipped)", len(records), skipped)
    return records
