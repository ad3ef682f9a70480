"""Event extraction from raw iCalendar feed text.

A deliberately small reader: it unfolds content lines, cuts the text into
VEVENT blocks and pulls SUMMARY, DTSTART and DTEND out of each block.
Recurrence rules, alarms and time zone definitions are ignored.

Property names are only recognized at the start of a content line, so
SUMMARY text mentioned inside another property (X-ALT-SUMMARY, a DESCRIPTION
that quotes "SUMMARY:") never shadows the real one.
"""

import logging
import re
from datetime import tzinfo
from typing import Optional

from walldash.calendar.ics_datetime import parse_ics_moment, unescape_text
from walldash.models import CalendarEvent

logger = logging.getLogger(__name__)

EVENT_MARKER = "BEGIN:VEVENT"

# A line break followed by spaces or tabs continues the previous line; all of
# that leading whitespace goes with the break
_FOLDED_LINE = re.compile(r"\r?\n[ \t]+")
_LINE_BREAK = re.compile(r"\r\n?")

_SUMMARY = re.compile(r"^SUMMARY(?:;[^\n]*?)?:(.*)$", re.MULTILINE)
_DTSTART = re.compile(r"^DTSTART(?:;[^\n]*)?:([^:\n]*)$", re.MULTILINE)
_DTEND = re.compile(r"^DTEND(?:;[^\n]*)?:([^:\n]*)$", re.MULTILINE)


def unfold_lines(text: str) -> str:
    """Rejoin folded content lines and normalize line breaks to LF."""
    return _LINE_BREAK.sub("\n", _FOLDED_LINE.sub("", text))


def split_event_blocks(text: str) -> list[str]:
    """Return the text of each VEVENT block, dropping the calendar preamble."""
    return unfold_lines(text).split(EVENT_MARKER)[1:]


def _property_value(pattern: re.Pattern[str], block: str) -> Optional[str]:
    match = pattern.search(block)
    if match is None:
        return None
    return match.group(1).strip()


def parse_event_block(block: str, local_tz: Optional[tzinfo] = None) -> Optional[CalendarEvent]:
    """Build a CalendarEvent from one VEVENT block.

    Args:
        block: Unfolded text following a BEGIN:VEVENT marker
        local_tz: Observer timezone for floating date-times; None uses the host zone

    Returns:
        The event, or None when the summary or a parseable start is missing
    """
    summary = _property_value(_SUMMARY, block)
    start_raw = _property_value(_DTSTART, block)
    if summary is None or start_raw is None:
        return None

    start = parse_ics_moment(start_raw, local_tz)
    if start is None:
        logger.debug("Dropping event %r with unparseable DTSTART %r", summary, start_raw)
        return None

    end_raw = _property_value(_DTEND, block)
    end = parse_ics_moment(end_raw, local_tz) if end_raw is not None else None

    return CalendarEvent(
        summary=unescape_text(summary),
        start=start.value,
        end=end.value if end is not None else start.value,
        all_day=start.all_day,
    )


def extract_events(text: str, local_tz: Optional[tzinfo] = None) -> list[CalendarEvent]:
    """Extract single events from iCalendar text.

    Never raises for string input; malformed or empty feeds yield no events.

    Args:
        text: Raw calendar feed text (CRLF or LF line endings)
        local_tz: Observer timezone for floating date-times; None uses the host zone

    Returns:
        Events in feed order
    """
    blocks = split_event_blocks(text)
    events: list[CalendarEvent] = []
    for block in blocks:
        event = parse_event_block(block, local_tz)
        if event is not None:
            events.append(event)

    if len(events) != len(blocks):
        logger.debug("Skipped %d of %d VEVENT blocks", len(blocks) - len(events), len(blocks))
    logger.info("Extracted %d calendar events", len(events))
    return events
