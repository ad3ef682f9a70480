"""Observer timezone resolution and the overridable clock."""

from __future__ import annotations

import datetime
import logging
import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "WALLDASH_TEST_TIME"

# Obsolete names still found in exported settings
TZ_ALIAS_MAP: dict[str, str] = {
    "US/Pacific": "America/Los_Angeles",
    "US/Mountain": "America/Denver",
    "US/Central": "America/Chicago",
    "US/Eastern": "America/New_York",
    "US/Alaska": "America/Anchorage",
    "US/Hawaii": "Pacific/Honolulu",
    "US/Arizona": "America/Phoenix",
    "GMT": "UTC",
    "Etc/UTC": "UTC",
    "Etc/GMT": "UTC",
    "Zulu": "UTC",
}


def resolve_timezone(name: str | None) -> ZoneInfo | None:
    """Resolve an IANA timezone name (or a known alias) to a ZoneInfo.

    Args:
        name: Timezone name such as "America/Los_Angeles"; None or "" means host local

    Returns:
        The zone, or None when the host local zone should be used
    """
    if not name:
        return None
    canonical = TZ_ALIAS_MAP.get(name.strip(), name.strip())
    try:
        return ZoneInfo(canonical)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r; falling back to host local time", name)
        return None


def now_local(tz: datetime.tzinfo | None = None) -> datetime.datetime:
    """Return the current aware time in tz (host local zone when None).

    Can be overridden for testing via the WALLDASH_TEST_TIME environment
    variable holding an ISO 8601 datetime (e.g. "2024-06-15T08:00:00-07:00").
    A naive override is read in tz.
    """
    test_time = os.environ.get(TEST_TIME_ENV)
    if test_time:
        try:
            from dateutil import parser as date_parser

            current = date_parser.isoparse(test_time)
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", TEST_TIME_ENV, test_time)
        else:
            if current.tzinfo is None:
                return current.replace(tzinfo=tz) if tz is not None else current.astimezone()
            return current.astimezone(tz) if tz is not None else current.astimezone()

    if tz is not None:
        return datetime.datetime.now(tz)
    return datetime.datetime.now().astimezone()
