"""Lenient date parsing for cells of spreadsheet and bill exports."""

import logging
import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

_SEGMENT_SPLIT = re.compile(r"[/-]")

# Two fills that differ in year, month and day
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)


def parse_generic_date(text: str) -> Optional[date]:
    """Parse a free-form date string such as "2024-01-31" or "1/31/24".

    Month-first ordering is assumed for ambiguous numeric dates, matching the
    US-style exports the dashboard consumes. Any time component is dropped.
    Year, month and day must all come from the text: partial values such as
    "Oct", "12" or "Monday" are rejected instead of being completed from the
    current date.

    Returns:
        The calendar date, or None when the text is not a complete date
    """
    text = text.strip()
    if not text:
        return None
    try:
        first = date_parser.parse(text, default=_FILL_A).date()
        second = date_parser.parse(text, default=_FILL_B).date()
    except (ValueError, OverflowError):
        return None
    # A field missing from the text shows up as a difference between the fills
    if first != second:
        return None
    return first


def parse_segmented_date(text: str) -> Optional[date]:
    """Parse a date made of three numeric segments split on "/" or "-".

    A four-digit first segment is read as year-month-day, anything else as
    month/day/year.
    """
    parts = _SEGMENT_SPLIT.split(text.strip())
    if len(parts) != 3:
        return None
    try:
        first, second, third = (int(part) for part in parts)
    except ValueError:
        return None

    try:
        if len(parts[0].strip()) == 4:
            return date(first, second, third)
        return date(third, first, second)
    except ValueError:
        return None


def parse_cell_date(text: str) -> Optional[date]:
    """Parse a date cell, trying the generic parser before the segment split."""
    parsed = parse_generic_date(text)
    if parsed is None:
        parsed = parse_segmented_date(text)
        if parsed is not None:
            logger.debug("Parsed %r with segment fallback", text)
    return parsed
