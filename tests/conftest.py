"""Shared fixtures for walldash tests."""

from collections.abc import Callable, Generator
from datetime import UTC
from typing import Any
from zoneinfo import ZoneInfo

import pytest


@pytest.fixture(autouse=True)
def clean_walldash_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear walldash environment variables so host settings never leak into tests."""
    for name in (
        "WALLDASH_TEST_TIME",
        "WALLDASH_TIMEZONE",
        "WALLDASH_CALENDAR_URL",
        "WALLDASH_SHEET_URL",
        "WALLDASH_LOG_LEVEL",
        "WALLDASH_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def pacific() -> ZoneInfo:
    """Deterministic observer zone so floating times do not depend on the host."""
    return ZoneInfo("America/Los_Angeles")


@pytest.fixture
def utc() -> Any:
    return UTC


@pytest.fixture
def bill_csv() -> str:
    """A utility bill export with metadata lines ahead of the header."""
    return (
        "Name,Pat Household\r\n"
        "Address,\"12 Elm St, Sacramento CA\"\r\n"
        "Account Number,0042-1138\r\n"
        "\r\n"
        "TYPE,START DATE,END DATE,IMPORT (kWh),EXPORT (kWh),COST,NOTES\r\n"
        "Electric billing,2024-01-01,2024-01-31,\"612.5\",\"40.0\",\"$101.20\",\r\n"
        "Electric billing,2024-02-01,2024-02-29,\"580.0\",\"600.0\",\"$95.10\",solar month\r\n"
        "Adjustment,2024-02-01,2024-02-29,0,0,\"-$5.00\",credit\r\n"
        "Electric billing,2024-03-01,TBD,400,0,$70.00,\r\n"
        "Electric billing,2024-03-01,2024-03-31,\"1,024.75\",,,\r\n"
    )


@pytest.fixture
def maintenance_csv() -> str:
    """A published maintenance sheet with two vehicle blocks."""
    return (
        "Subaru Outback,Oil Change,Tire Rotation,Notes\r\n"
        "1/15/24,Done,,Dealer\r\n"
        "7/20/24,Done,Done,\r\n"
        "3/2/24,,Done,\"Costco, Folsom\"\r\n"
        ",,,\r\n"
        "Honda Fit,Oil Change,Brakes\r\n"
        "11/3/2023,Done,\r\n"
        "TBD,,Rotors\r\n"
        "2/14/2024,,Pads\r\n"
    )


@pytest.fixture
def ics_builder() -> Callable[..., str]:
    """Build a minimal VCALENDAR around raw VEVENT property lines.

    Each positional argument is a list of property lines for one event.
    """

    def _build(*events: list[str], line_ending: str = "\r\n") -> str:
        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//Family//Calendar//EN",
        ]
        for properties in events:
            lines.append("BEGIN:VEVENT")
            lines.extend(properties)
            lines.append("END:VEVENT")
        lines.append("END:VCALENDAR")
        return line_ending.join(lines) + line_ending

    return _build
