"""Value models produced by the walldash parsers."""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

# Timed values are aware datetimes, all-day values are plain dates
EventMoment = Union[datetime, date]


class BillingRecord(BaseModel):
    """One billing period from an energy bill export, keyed by its end date."""

    date: date
    usage_kwh: float = Field(default=0.0, description="Net usage, or raw import when net <= 0")
    cost: Optional[float] = Field(default=None, description="Billed amount; None when not reported")

    model_config = ConfigDict(frozen=True)


class SheetSection(BaseModel):
    """A titled run of rows from a spreadsheet export, newest row first."""

    title: str
    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    model_config = ConfigDict(frozen=True)


class CalendarEvent(BaseModel):
    """A single event extracted from an iCalendar feed."""

    summary: str
    start: EventMoment
    end: EventMoment
    all_day: bool = Field(default=False, alias="allDay")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_serializer("start", "end", when_used="json")
    def serialize_moment(self, value: EventMoment) -> str:
        """Serialize dates as YYYY-MM-DD and datetimes as ISO 8601 with offset."""
        return value.isoformat()


class EventDayBuckets(BaseModel):
    """Events grouped into the two days a wall display shows."""

    today: tuple[CalendarEvent, ...] = ()
    tomorrow: tuple[CalendarEvent, ...] = ()

    model_config = ConfigDict(frozen=True)


class ServiceHistoryEntry(BaseModel):
    """One dated row of a maintenance section, date cell split from the rest."""

    date: str
    details: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


class ServiceStatus(BaseModel):
    """Where one vehicle stands on a tracked service such as oil changes."""

    title: str
    service: str
    tracked: bool = Field(default=False, description="Whether a header matches the service")
    last_service: Optional[str] = None
    overdue: bool = False
    history: tuple[ServiceHistoryEntry, ...] = ()

    model_config = ConfigDict(frozen=True)
