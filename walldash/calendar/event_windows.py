"""Day-based views over parsed calendar events."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from walldash.models import CalendarEvent, EventDayBuckets

logger = logging.getLogger(__name__)


def _local_day_bounds(day: date, tz: Optional[tzinfo]) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)
    if tz is not None:
        return start.replace(tzinfo=tz), end.replace(tzinfo=tz)
    return start.astimezone(), end.astimezone()


def event_starts_on(event: CalendarEvent, day: date, tz: Optional[tzinfo] = None) -> bool:
    """Return True when the event starts on the given day in the observer zone.

    All-day events compare their start date directly; timed events must start
    at or after local midnight and before the following midnight.
    """
    if event.all_day or not isinstance(event.start, datetime):
        start_day = event.start.date() if isinstance(event.start, datetime) else event.start
        return start_day == day
    day_start, day_end = _local_day_bounds(day, tz)
    return day_start <= event.start < day_end


def _start_sort_key(event: CalendarEvent, tz: Optional[tzinfo]) -> tuple[int, datetime]:
    if isinstance(event.start, datetime):
        return (1, event.start)
    # All-day events lead their day
    return (0, _local_day_bounds(event.start, tz)[0])


def events_on_day(
    events: Iterable[CalendarEvent], day: date, tz: Optional[tzinfo] = None
) -> list[CalendarEvent]:
    """Return the events starting on day, all-day events first, then by start time."""
    matching = [event for event in events if event_starts_on(event, day, tz)]
    return sorted(matching, key=lambda event: _start_sort_key(event, tz))


def split_today_tomorrow(
    events: Iterable[CalendarEvent], now: datetime, tz: Optional[tzinfo] = None
) -> EventDayBuckets:
    """Group events into today's and tomorrow's agenda.

    Args:
        events: Parsed events in any order
        now: Current instant; naive values are taken as host local time
        tz: Observer timezone; None uses the host zone

    Returns:
        EventDayBuckets with each bucket sorted by start
    """
    events = list(events)
    if tz is not None:
        local_now = now.astimezone(tz) if now.tzinfo is not None else now.replace(tzinfo=tz)
    else:
        local_now = now.astimezone()
    today = local_now.date()
    tomorrow = today + timedelta(days=1)

    buckets = EventDayBuckets(
        today=tuple(events_on_day(events, today, tz)),
        tomorrow=tuple(events_on_day(events, tomorrow, tz)),
    )
    logger.debug(
        "Bucketed %d events: %d today, %d tomorrow",
        len(events),
        len(buckets.today),
        len(buckets.tomorrow),
    )
    return buckets
