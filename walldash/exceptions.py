"""Exception hierarchy for walldash.

Only failures a caller has to tell apart are raised. Field-level problems
inside a feed (a bad date, a non-numeric cell, an event without a start) are
dropped by the extractors and never surface here.
"""

from typing import Optional, Sequence


class WalldashError(Exception):
    """Base exception for every error walldash raises deliberately."""


class BillingImportError(WalldashError):
    """Base exception for energy bill CSV extraction failures.

    Callers that only need to show an error banner can catch this class;
    callers that report details catch the subclasses.
    """


class BillingHeaderNotFoundError(BillingImportError):
    """No row of the export qualifies as the bill header.

    Raised when:
    - The text is empty or contains only blank rows
    - No row has a TYPE cell together with a START DATE or END DATE cell

    Not retryable without different input.
    """

    def __init__(self, rows_scanned: int) -> None:
        self.rows_scanned = rows_scanned
        super().__init__(
            f"Could not find a header row with TYPE and START DATE/END DATE columns "
            f"(scanned {rows_scanned} rows)"
        )


class BillingColumnsMissingError(BillingImportError):
    """The header row was found but required columns are absent.

    Attributes:
        missing: Labels of the required columns that were not resolved
        found: Normalized header cells that were present
    """

    def __init__(self, missing: Sequence[str], found: Sequence[str]) -> None:
        self.missing = list(missing)
        self.found = list(found)
        super().__init__(
            f"Missing required columns: {', '.join(self.missing)}. "
            f"Found columns: {', '.join(self.found)}"
        )


class BillingNoRecordsError(BillingImportError):
    """The header was valid but no data row produced a usable record."""

    def __init__(self, rows_scanned: int) -> None:
        self.rows_scanned = rows_scanned
        super().__init__(f"No valid records found in CSV ({rows_scanned} data rows scanned)")


class SourceFetchError(WalldashError):
    """Raw feed text could not be retrieved.

    Raised by the fetch helpers after their retries are exhausted. The parsers
    never raise it.
    """

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")
