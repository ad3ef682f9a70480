"""Command-line entry for walldash.

Parses a calendar feed, a maintenance sheet or an energy bill export and
prints the result as JSON, the same shape the dashboard's API returns.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, NoReturn, Optional

from pydantic import BaseModel

from . import _init_logging
from .calendar.event_windows import split_today_tomorrow
from .config_loader import Config, load_config
from .core.logging_config import configure_logging
from .core.timezone_utils import now_local
from .exceptions import BillingImportError, SourceFetchError
from .sources import load_billing_records, load_calendar_events, load_sheet_sections
from .tabular.sheet_sections import service_status

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FETCH_FAILED = 1
EXIT_BAD_INPUT = 2


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the walldash CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="walldash",
        description="Walldash - parse dashboard feeds into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m walldash calendar family.ics            # All events in a feed
  python -m walldash calendar --today               # Today/tomorrow from the configured feed
  python -m walldash sheet https://.../pub?output=csv
  python -m walldash sheet --status maintenance.csv  # Oil change status per vehicle
  python -m walldash bill - < bill_export.csv       # Read the export from stdin
        """,
    )
    parser.add_argument("--config", metavar="PATH", help="Config file (default: ./walldash.yaml)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    calendar = commands.add_parser("calendar", help="Extract events from an ICS feed")
    calendar.add_argument("source", nargs="?", help="File, URL or '-' (default: calendar_url)")
    calendar.add_argument(
        "--today", action="store_true", help="Only print today's and tomorrow's events"
    )

    sheet = commands.add_parser("sheet", help="Split a sheet CSV export into sections")
    sheet.add_argument("source", nargs="?", help="File, URL or '-' (default: sheet_url)")
    sheet.add_argument(
        "--status",
        action="store_true",
        help="Report each section's latest service and whether it is overdue",
    )
    sheet.add_argument(
        "--service", default="oil", metavar="KEYWORD", help="Service header to track (default: oil)"
    )

    bill = commands.add_parser("bill", help="Extract usage records from an energy bill CSV")
    bill.add_argument("source", help="File, URL or '-'")

    return parser


def _resolve_source(args: argparse.Namespace, config: Config) -> Optional[str]:
    if args.source:
        return args.source
    if args.command == "calendar":
        return config.calendar_url
    if args.command == "sheet":
        return config.sheet_url
    return None


async def _run(args: argparse.Namespace, config: Config, source: str) -> Any:
    if args.command == "calendar":
        events = await load_calendar_events(source, config)
        if args.today:
            return split_today_tomorrow(events, now_local(config.tz), config.tz)
        return events
    if args.command == "sheet":
        sections = await load_sheet_sections(source, config)
        if args.status:
            today = now_local(config.tz).date()
            return [
                service_status(section, args.service, today, config.service_interval_months)
                for section in sections
            ]
        return sections
    return await load_billing_records(source, config)


def _to_json(result: Any) -> str:
    if isinstance(result, BaseModel):
        payload = result.model_dump(mode="json", by_alias=True)
    else:
        payload = [item.model_dump(mode="json", by_alias=True) for item in result]
    return json.dumps(payload, indent=2)


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the walldash CLI and exit with a status code.

    Exit codes: 0 on success, 1 when a feed could not be fetched, 2 when the
    input is unusable (no source, or a bill export without usable records).
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    _init_logging("DEBUG" if args.debug else None)
    config = load_config(args.config)
    configure_logging(debug_mode=args.debug or config.log_level == "DEBUG")

    source = _resolve_source(args, config)
    if source is None:
        print(f"No source given and no default configured for '{args.command}'", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)

    try:
        result = asyncio.run(_run(args, config, source))
    except BillingImportError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)
    except SourceFetchError as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_FETCH_FAILED)
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)

    print(_to_json(result))
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
