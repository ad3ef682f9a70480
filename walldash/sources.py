"""Fetch-then-parse helpers for the dashboard feeds.

These are the caller side of the parsers: they obtain raw text from a URL,
a file or stdin and hand it to the matching extractor.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import httpx

from walldash.calendar.ics_events import extract_events
from walldash.config_loader import Config
from walldash.core.http_client import fetch_text
from walldash.models import BillingRecord, CalendarEvent, SheetSection
from walldash.tabular.billing import extract_billing_records
from walldash.tabular.sheet_sections import extract_sections

logger = logging.getLogger(__name__)


def is_url(source: str) -> bool:
    """Return True for http(s) and webcal URLs."""
    return source.lower().startswith(("http://", "https://", "webcal://"))


async def read_source(
    source: str, config: Config, client: Optional[httpx.AsyncClient] = None
) -> str:
    """Return the raw text behind a URL, a file path, or "-" for stdin.

    webcal:// URLs are fetched over https.
    """
    if source == "-":
        return sys.stdin.read()
    if is_url(source):
        url = "https://" + source[len("webcal://") :] if source.lower().startswith("webcal://") else source
        return await fetch_text(
            url,
            timeout_seconds=config.fetch_timeout_seconds,
            retries=config.fetch_retries,
            client=client,
        )
    # Bytes keep CRLF inside quoted cells intact; utf-8-sig drops the BOM
    # spreadsheet exports often start with
    return Path(source).read_bytes().decode("utf-8-sig")


async def load_calendar_events(
    source: str, config: Config, client: Optional[httpx.AsyncClient] = None
) -> list[CalendarEvent]:
    """Read an ICS feed and extract its events in the configured zone."""
    text = await read_source(source, config, client)
    return extract_events(text, config.tz)


async def load_sheet_sections(
    source: str, config: Config, client: Optional[httpx.AsyncClient] = None
) -> list[SheetSection]:
    """Read a published sheet export and split it into sections."""
    text = await read_source(source, config, client)
    return extract_sections(text)


async def load_billing_records(
    source: str, config: Config, client: Optional[httpx.AsyncClient] = None
) -> list[BillingRecord]:
    """Read an energy bill export and extract its records.

    Raises:
        BillingImportError: If the export has no usable header or records
    """
    text = await read_source(source, config, client)
    return extract_billing_records(text)
