"""Unit tests for walldash.calendar.event_windows."""

from datetime import UTC, date, datetime

import pytest

from walldash.calendar.event_windows import event_starts_on, events_on_day, split_today_tomorrow
from walldash.models import CalendarEvent

pytestmark = pytest.mark.unit


def _all_day(summary: str, day: date) -> CalendarEvent:
    return CalendarEvent(summary=summary, start=day, end=day, all_day=True)


def _timed(summary: str, start: datetime) -> CalendarEvent:
    return CalendarEvent(summary=summary, start=start, end=start, all_day=False)


@pytest.fixture
def week_events() -> list[CalendarEvent]:
    return [
        _timed("Late dinner", datetime(2024, 6, 16, 6, 0, tzinfo=UTC)),  # 23:00 PDT on the 15th
        _all_day("Birthday", date(2024, 6, 15)),
        _timed("Swim", datetime(2024, 6, 15, 17, 0, tzinfo=UTC)),  # 10:00 PDT
        _timed("Early flight", datetime(2024, 6, 16, 8, 0, tzinfo=UTC)),  # 01:00 PDT on the 16th
        _all_day("Camp", date(2024, 6, 16)),
        _all_day("Recital", date(2024, 6, 17)),
    ]


class TestSplitTodayTomorrow:
    """Tests for split_today_tomorrow."""

    def test_buckets_by_observer_day(self, week_events, pacific):
        now = datetime(2024, 6, 15, 8, 0, tzinfo=pacific)

        buckets = split_today_tomorrow(week_events, now, pacific)

        assert [event.summary for event in buckets.today] == ["Birthday", "Swim", "Late dinner"]
        assert [event.summary for event in buckets.tomorrow] == ["Camp", "Early flight"]

    def test_now_in_utc_is_converted_first(self, week_events, pacific):
        # 03:00 UTC on the 16th is still the evening of the 15th in Pacific time
        now = datetime(2024, 6, 16, 3, 0, tzinfo=UTC)

        buckets = split_today_tomorrow(week_events, now, pacific)

        assert "Birthday" in [event.summary for event in buckets.today]

    def test_no_events(self, pacific):
        buckets = split_today_tomorrow([], datetime(2024, 6, 15, tzinfo=pacific), pacific)

        assert buckets.today == ()
        assert buckets.tomorrow == ()

    def test_serializes_nested_events(self, week_events, pacific):
        buckets = split_today_tomorrow(week_events, datetime(2024, 6, 15, 8, 0, tzinfo=pacific), pacific)

        payload = buckets.model_dump(mode="json", by_alias=True)

        assert payload["today"][0] == {
            "summary": "Birthday",
            "start": "2024-06-15",
            "end": "2024-06-15",
            "allDay": True,
        }


class TestEventsOnDay:
    """Tests for events_on_day and event_starts_on."""

    def test_events_on_day(self, week_events, pacific):
        events = events_on_day(week_events, date(2024, 6, 17), pacific)

        assert [event.summary for event in events] == ["Recital"]

    def test_midnight_belongs_to_the_new_day(self, pacific):
        event = _timed("Midnight", datetime(2024, 6, 16, 0, 0, tzinfo=pacific))

        assert event_starts_on(event, date(2024, 6, 16), pacific)
        assert not event_starts_on(event, date(2024, 6, 15), pacific)
