"""Value parsing helpers for iCalendar properties.

Only the two shapes household feeds use are understood: bare dates
(YYYYMMDD) for all-day events and YYYYMMDDTHHMMSS date-times, either UTC
(trailing Z) or floating local time. TZID parameters are not looked up;
their values are read as the observer's local time.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, tzinfo
from typing import Optional, Union

logger = logging.getLogger(__name__)

_NOT_DATE_OR_T = re.compile(r"[^0-9T]")
_DATE_ONLY = re.compile(r"(\d{4})(\d{2})(\d{2})")
_DATE_TIME = re.compile(r"(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})")
_TEXT_ESCAPE = re.compile(r"\\([\\,;nN])")

_ESCAPED_CHARS = {"\\": "\\", ",": ",", ";": ";", "n": "\n", "N": "\n"}


@dataclass(frozen=True)
class ICSMoment:
    """A parsed DTSTART/DTEND value and its all-day classification."""

    value: Union[datetime, date]
    all_day: bool


def parse_ics_moment(raw: str, local_tz: Optional[tzinfo] = None) -> Optional[ICSMoment]:
    """Parse a DTSTART or DTEND value.

    Everything except digits and "T" is stripped before classification, so
    trailing markers and stray characters are tolerated.

    Args:
        raw: Property value as it appears after the colon
        local_tz: Observer timezone for floating date-times; None uses the host zone

    Returns:
        ICSMoment with a date (all-day) or an aware datetime, or None if unparseable

    Examples:
        >>> parse_ics_moment("20240615")
        ICSMoment(value=datetime.date(2024, 6, 15), all_day=True)
        >>> parse_ics_moment("20240615T140000Z").value.isoformat()
        '2024-06-15T14:00:00+00:00'
    """
    raw = raw.strip()
    cleaned = _NOT_DATE_OR_T.sub("", raw)

    date_match = _DATE_ONLY.fullmatch(cleaned)
    if date_match:
        try:
            return ICSMoment(date(*(int(part) for part in date_match.groups())), all_day=True)
        except ValueError:
            logger.debug("Invalid calendar date in ICS value %r", raw)
            return None

    if "T" not in cleaned:
        return None

    time_match = _DATE_TIME.fullmatch(cleaned)
    if time_match is None:
        logger.debug("Unrecognized ICS date-time shape %r", raw)
        return None

    try:
        naive = datetime(*(int(part) for part in time_match.groups()))
    except ValueError:
        logger.debug("Invalid ICS date-time %r", raw)
        return None

    if raw.endswith("Z"):
        return ICSMoment(naive.replace(tzinfo=UTC), all_day=False)
    if local_tz is not None:
        return ICSMoment(naive.replace(tzinfo=local_tz), all_day=False)
    # Naive astimezone() resolves the host zone with the DST offset of that date
    return ICSMoment(naive.astimezone(), all_day=False)


def unescape_text(value: str) -> str:
    r"""Undo iCalendar TEXT escaping.

    Examples:
        >>> unescape_text(r"Mom\, Dad\, and kids")
        'Mom, Dad, and kids'
    """
    return _TEXT_ESCAPE.sub(lambda match: _ESCAPED_CHARS[match.group(1)], value)
