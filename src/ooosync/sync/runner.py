"""Fetch Clockify time-off requests and sync them to Google Calendar."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from ooosync.calendar.models import SyncResult
from ooosync.calendar.sync import CalendarServiceFactory, OOOCalendarSync
from ooosync.clockify.client import ClockifyClient
from ooosync.clockify.filter import filter_by_created_at
from ooosync.clockify.models import TimeOffQuery
from ooosync.core.config import (
    SetupError,
    get_calendar_ids,
    get_clockify_base_url,
    get_clockify_credentials,
    get_forced_user_id,
    get_google_service_account_info,
)
from ooosync.core.gcal_client import get_calendar_service_factory
from ooosync.core.timeparse import parse_and_format_for_source_api, parse_instant
from ooosync.sync.event import SyncEvent

logger = logging.getLogger(__name__)

NO_REQUESTS_MESSAGE = "No requests to process."


@dataclass
class RunReport:
    """What a run did.

    ``result`` is None when the run only listed requests or found nothing
    to sync.
    """

    mode: str
    fetched_bytes: int = 0
    requests: int = 0
    result: SyncResult | None = None

    @property
    def synced(self) -> bool:
        """Whether the calendar sync step ran."""
        return self.result is not None


def pretty_json(raw: bytes | str) -> str:
    """Indent a JSON document, or return it unchanged if it isn't JSON."""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text


def _parse_created_bound(value: str, name: str) -> datetime | None:
    if not value:
        return None
    try:
        return parse_instant(value)
    except ValueError as e:
        raise SetupError(f"invalid {name}: {e}") from e


def build_query(event: SyncEvent) -> TimeOffQuery:
    """Translate a validated event into a Clockify search.

    Raises:
        SetupError: If start or end cannot be parsed
    """
    bounds = {}
    for name in ("start", "end"):
        value = getattr(event, name)
        if not value:
            continue
        try:
            bounds[name] = parse_and_format_for_source_api(value)
        except ValueError as e:
            raise SetupError(f"invalid {name} time: {e}") from e

    query = TimeOffQuery(
        start=bounds.get("start"),
        end=bounds.get("end"),
        page=event.page,
        page_size=event.page_size,
        statuses=event.statuses,
    )

    forced_user = get_forced_user_id()
    if forced_user:
        logger.warning(f"CLOCKIFY_FORCE_USER_ID active: only syncing user {forced_user}")
        query.users = [forced_user]

    return query


def run(
    event: SyncEvent,
    calendar_factory: CalendarServiceFactory | None = None,
    dry_run: bool = False,
    echo: Callable[[str], None] = print,
) -> RunReport:
    """Run one fetch (and, in created mode, sync) cycle.

    All configuration is checked before the first network call. Without
    created-at bounds the fetched response is echoed as pretty JSON and
    nothing is synced.

    Args:
        event: Run parameters
        calendar_factory: Calendar handle factory; built from
            GOOGLE_SERVICE_ACCOUNT_JSON_B64 when omitted
        dry_run: Look up existing events but don't insert
        echo: Output sink for the JSON listing and the summary line

    Raises:
        SetupError: Missing configuration or invalid parameters
        ClockifyAPIError: Clockify returned a non-2xx status
        httpx.HTTPError: Clockify could not be reached
        SourceResponseError: The Clockify response could not be decoded
    """
    event.validate_for_run()

    api_key, workspace_id = get_clockify_credentials()
    service_account_info = get_google_service_account_info()

    query = build_query(event)
    created_start = _parse_created_bound(event.created_start, "createdStart")
    created_end = _parse_created_bound(event.created_end, "createdEnd")

    syncing = event.filters_by_created
    if syncing and calendar_factory is None:
        calendar_factory = get_calendar_service_factory(service_account_info)

    with ClockifyClient(api_key, base_url=get_clockify_base_url()) as client:
        raw = client.fetch_time_off_requests(workspace_id, query)

    if not syncing:
        echo(pretty_json(raw))
        return RunReport(mode="period", fetched_bytes=len(raw))

    requests = filter_by_created_at(raw, created_start, created_end)
    report = RunReport(mode="created", fetched_bytes=len(raw), requests=len(requests))
    if not requests:
        echo(NO_REQUESTS_MESSAGE)
        return report

    logger.info(f"Syncing {len(requests)} requests")
    sync = OOOCalendarSync(calendar_factory, calendar_ids=get_calendar_ids(), dry_run=dry_run)
    report.result = sync.sync_requests(requests)
    echo(f"Sync complete: {report.result}")

    return report
