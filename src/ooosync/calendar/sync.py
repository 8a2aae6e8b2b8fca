"""Sync Clockify time-off requests into users' calendars as all-day OOO events."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Protocol

from ooosync.calendar.models import (
    CORRELATION_PROPERTY,
    AllDayWindow,
    FailureKind,
    InvalidPeriodError,
    OutcomeStatus,
    SyncOutcome,
    SyncResult,
    make_event_body,
    resolve_zone,
    to_all_day_window,
)
from ooosync.clockify.models import TimeOffRequest
from ooosync.core.config import DEFAULT_CALENDAR_IDS
from ooosync.core.timeparse import parse_instant

logger = logging.getLogger(__name__)


class CalendarService(Protocol):
    """Calendar operations available while acting as one user."""

    def list_events(
        self,
        calendar_id: str,
        private_property: tuple[str, str],
        time_min: datetime,
        time_max: datetime,
    ) -> list[dict]: ...

    def insert_event(self, calendar_id: str, body: dict) -> dict: ...


CalendarServiceFactory = Callable[[str], CalendarService]


def parse_period(request: TimeOffRequest) -> tuple[datetime, datetime]:
    """Parse a request's period bounds.

    Raises:
        InvalidPeriodError: If either bound is unparseable
    """
    try:
        start = parse_instant(request.period_start)
    except ValueError as e:
        raise InvalidPeriodError(f"bad period.start: {e}") from e
    try:
        end = parse_instant(request.period_end)
    except ValueError as e:
        raise InvalidPeriodError(f"bad period.end: {e}") from e
    return start, end


class OOOCalendarSync:
    """Insert OOO events for time-off requests, skipping ones already synced.

    Each event carries the Clockify request ID as a private extended
    property. Before inserting, the calendar is searched for that property
    within the event's date range, so reruns over the same requests are
    no-ops.
    """

    def __init__(
        self,
        service_factory: CalendarServiceFactory,
        calendar_ids: Iterable[str] = DEFAULT_CALENDAR_IDS,
        dry_run: bool = False,
    ) -> None:
        """Initialize the sync.

        Args:
            service_factory: Returns a calendar handle acting as the given user
            calendar_ids: Calendars to write to, relative to each user
            dry_run: If True, look up existing events but don't insert
        """
        self.service_factory = service_factory
        self.calendar_ids = tuple(calendar_ids)
        self.dry_run = dry_run

    def sync_requests(self, requests: Iterable[TimeOffRequest]) -> SyncResult:
        """Sync every request, collecting one outcome per request and calendar.

        Failures are recorded against the request they belong to; they never
        stop the remaining requests from being attempted.
        """
        result = SyncResult()
        for request in requests:
            for outcome in self.sync_request(request):
                logger.log(
                    logging.ERROR if outcome.is_failure else logging.INFO,
                    str(outcome),
                )
                result.add(outcome)
        return result

    def sync_request(self, request: TimeOffRequest) -> list[SyncOutcome]:
        """Sync one request to all target calendars."""

        def failed(kind: FailureKind, detail: str) -> list[SyncOutcome]:
            return [
                SyncOutcome(
                    request_id=request.id,
                    user_email=request.user_email,
                    status=OutcomeStatus.FAILED,
                    failure=kind,
                    detail=detail,
                )
            ]

        try:
            resolve_zone(request.user_time_zone)
        except ValueError as e:
            return failed(FailureKind.UNKNOWN_TIME_ZONE, str(e))

        try:
            start, end = parse_period(request)
        except InvalidPeriodError as e:
            return failed(FailureKind.INVALID_PERIOD, str(e))

        window = to_all_day_window(start, end, request.user_time_zone)

        try:
            service = self.service_factory(request.user_email)
        except Exception as e:
            return failed(FailureKind.CALENDAR_UNAVAILABLE, f"calendar service error: {e}")

        return [
            self._sync_to_calendar(service, calendar_id, request, window)
            for calendar_id in self.calendar_ids
        ]

    def _sync_to_calendar(
        self,
        service: CalendarService,
        calendar_id: str,
        request: TimeOffRequest,
        window: AllDayWindow,
    ) -> SyncOutcome:
        base = {
            "request_id": request.id,
            "user_email": request.user_email,
            "calendar_id": calendar_id,
        }

        try:
            existing = service.list_events(
                calendar_id,
                (CORRELATION_PROPERTY, request.id),
                window.time_min,
                window.time_max,
            )
        except Exception as e:
            return SyncOutcome(
                **base,
                status=OutcomeStatus.FAILED,
                failure=FailureKind.LOOKUP_FAILED,
                detail=f"lookup failed: {e}",
            )

        if existing:
            first = existing[0]
            if len(existing) > 1:
                ids = ", ".join(str(event.get("id")) for event in existing)
                logger.warning(
                    f"Found {len(existing)} events for req={request.id} "
                    f"user={request.user_email} cal={calendar_id}: {ids}"
                )
            start = first.get("start", {}).get("date")
            end = first.get("end", {}).get("date")
            return SyncOutcome(
                **base,
                status=OutcomeStatus.SKIPPED_EXISTING,
                event_id=first.get("id"),
                existing_count=len(existing),
                detail=f"{start} → {end}",
            )

        if self.dry_run:
            logger.info(f"Would insert OOO for req={request.id} cal={calendar_id} ({window})")
            return SyncOutcome(**base, status=OutcomeStatus.WOULD_INSERT, detail=str(window))

        try:
            created = service.insert_event(calendar_id, make_event_body(request, window))
        except Exception as e:
            return SyncOutcome(
                **base,
                status=OutcomeStatus.FAILED,
                failure=FailureKind.INSERT_FAILED,
                detail=f"insert failed: {e}",
            )

        return SyncOutcome(
            **base,
            status=OutcomeStatus.INSERTED,
            event_id=created.get("id") if created else None,
            detail=str(window),
        )
