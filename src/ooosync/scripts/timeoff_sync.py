#!/usr/bin/env python3
"""Sync approved Clockify time-off to users' Google Calendars as OOO events.

Without --by created (or without created-at bounds) the matching Clockify
requests are only printed as JSON. With them, each request created in the
window is inserted as an all-day event unless it is already on the calendar.

Usage:
    uv run ooo-sync --start 2025-12-01 --end 2026-01-31 \\
        --created-start 2025-11-30T00:00:00Z --created-end 2025-12-01T00:00:00Z
    uv run ooo-sync --by period --start 2025-12-01 --end 2025-12-31
"""

import argparse
import logging
import sys

import httpx

from ooosync.clockify.client import ClockifyAPIError
from ooosync.clockify.filter import SourceResponseError
from ooosync.core.config import SetupError
from ooosync.sync import SyncEvent, run

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress verbose logging
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def parse_statuses(value: str) -> list[str]:
    """Split a comma-separated status list, upper-casing each entry."""
    return [s.strip().upper() for s in value.split(",") if s.strip()]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Sync Clockify time-off requests to Google Calendar OOO events"
    )
    parser.add_argument("--start", default="", help="Period start (RFC3339 or YYYY-MM-DD)")
    parser.add_argument("--end", default="", help="Period end (RFC3339 or YYYY-MM-DD)")
    parser.add_argument(
        "--statuses",
        default="APPROVED",
        help="Comma-separated statuses: PENDING,APPROVED,REJECTED,ALL (default: APPROVED)",
    )
    parser.add_argument(
        "--by",
        choices=["period", "created"],
        default="created",
        help="Filter mode (default: created)",
    )
    parser.add_argument("--created-start", default="", help="Created >= this instant")
    parser.add_argument("--created-end", default="", help="Created < this instant")
    parser.add_argument("--page-size", type=int, default=50, help="Page size (1-200)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Look up existing events without inserting",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main() -> int:
    """Main entry point."""
    args = build_parser().parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.dry_run:
        logger.info("DRY RUN - no events will be inserted")

    event = SyncEvent(
        start=args.start,
        end=args.end,
        created_start=args.created_start,
        created_end=args.created_end,
        statuses=parse_statuses(args.statuses),
        by=args.by,
        page_size=args.page_size,
    )

    try:
        report = run(event, dry_run=args.dry_run)
    except SetupError as e:
        logger.error(str(e))
        return 1
    except (ClockifyAPIError, httpx.HTTPError) as e:
        logger.error(f"fetch clockify: {e}")
        return 1
    except SourceResponseError as e:
        logger.error(f"filter: {e}")
        return 1

    if report.result and report.result.errors:
        logger.error(f"{len(report.result.errors)} requests failed")
        for error in report.result.errors:
            logger.error(f"  Error: {error}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
