"""walldash - feed parsers for a household wall dashboard.

Turns the raw text of the dashboard's third-party feeds into structured
values: energy bill CSV exports into billing records, published maintenance
sheets into titled sections, and iCalendar feeds into events.
"""

__version__ = "0.3.0"

from typing import Optional

from walldash.calendar.ics_events import extract_events
from walldash.models import BillingRecord, CalendarEvent, EventDayBuckets, SheetSection
from walldash.tabular.billing import extract_billing_records
from walldash.tabular.sheet_sections import extract_sections
from walldash.tabular.tokenizer import tokenize

__all__ = [
    "BillingRecord",
    "CalendarEvent",
    "EventDayBuckets",
    "SheetSection",
    "extract_billing_records",
    "extract_events",
    "extract_sections",
    "tokenize",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to stderr.

    Sets a colorized formatter and level so that CLI diagnostics are visible.
    Callers may adjust the level later (e.g. from config).

    Honors the WALLDASH_DEBUG environment variable (truthy values: "1", "true",
    "yes", "on"), which forces DEBUG verbosity.
    """
    import logging
    import os
    import sys

    from colorlog import ColoredFormatter

    debug_env = os.environ.get("WALLDASH_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, with only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
