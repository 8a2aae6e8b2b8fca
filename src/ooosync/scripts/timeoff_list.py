#!/usr/bin/env python3
"""Print Clockify time-off requests as JSON, optionally filtered by creation time.

Read-only: nothing is written to any calendar.

Usage:
    uv run timeoff-list --start 2025-08-01 --end 2025-08-31
    uv run timeoff-list --by created --start 2025-11-01 --end 2026-01-31 \\
        --statuses ALL --created-start 2025-11-01 --created-end 2025-12-01
"""

import argparse
import json
import logging
import sys

import httpx

from ooosync.clockify.client import ClockifyAPIError, ClockifyClient
from ooosync.clockify.filter import SourceResponseError, render_envelope, select_by_created_at
from ooosync.clockify.models import TimeOffQuery
from ooosync.core.config import (
    SetupError,
    get_clockify_base_url,
    get_clockify_credentials,
    get_forced_user_id,
)
from ooosync.core.timeparse import parse_and_format_for_source_api, parse_instant
from ooosync.scripts.timeoff_sync import parse_statuses
from ooosync.sync.runner import pretty_json

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="List Clockify time-off requests as JSON")
    parser.add_argument("--start", default="", help="Period start (RFC3339 or YYYY-MM-DD)")
    parser.add_argument("--end", default="", help="Period end (RFC3339 or YYYY-MM-DD)")
    parser.add_argument(
        "--statuses",
        default="APPROVED",
        help="Comma-separated statuses: PENDING,APPROVED,REJECTED,ALL (default: APPROVED)",
    )
    parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--page-size", type=int, default=50, help="Page size (1-200)")
    parser.add_argument(
        "--by",
        choices=["period", "created"],
        default="period",
        help="Filter mode; created-at bounds only apply with 'created' (default: period)",
    )
    parser.add_argument("--created-start", default="", help="Created >= this instant")
    parser.add_argument("--created-end", default="", help="Created < this instant")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        if args.by == "created" and (not args.start or not args.end):
            raise SetupError("when by=created is used, both start and end must be provided")
        api_key, workspace_id = get_clockify_credentials()
        start = parse_and_format_for_source_api(args.start) if args.start else None
        end = parse_and_format_for_source_api(args.end) if args.end else None
        created_start = parse_instant(args.created_start) if args.created_start else None
        created_end = parse_instant(args.created_end) if args.created_end else None
    except ValueError as e:
        logger.error(str(e))
        return 1

    query = TimeOffQuery(
        start=start,
        end=end,
        page=args.page,
        page_size=args.page_size,
        statuses=parse_statuses(args.statuses),
    )
    forced_user = get_forced_user_id()
    if forced_user:
        query.users = [forced_user]

    try:
        with ClockifyClient(api_key, base_url=get_clockify_base_url()) as client:
            raw = client.fetch_time_off_requests(workspace_id, query)
    except (ClockifyAPIError, httpx.HTTPError) as e:
        logger.error(f"fetch clockify: {e}")
        return 1

    if args.by != "created" or (created_start is None and created_end is None):
        print(pretty_json(raw))
        return 0

    try:
        items = select_by_created_at(raw, created_start, created_end)
    except SourceResponseError as e:
        logger.error(str(e))
        return 1

    print(json.dumps(render_envelope(items), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
