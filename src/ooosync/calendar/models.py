"""Data models for OOO calendar events."""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ooosync.clockify.models import TimeOffRequest

# Private extended property holding the Clockify request ID
CORRELATION_PROPERTY = "clockifyRequestId"

EVENT_SUMMARY = "[TEST] OOO"


class UnknownTimeZoneError(ValueError):
    """A request's time zone name does not resolve to a known zone."""


class InvalidPeriodError(ValueError):
    """A request's time-off period cannot be parsed."""


def resolve_zone(tz_name: str) -> ZoneInfo:
    """Resolve an IANA zone name. An empty name means UTC.

    Raises:
        UnknownTimeZoneError: If the name is unknown
    """
    if not tz_name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise UnknownTimeZoneError(f"unknown tz {tz_name!r}: {e}") from e


@dataclass(frozen=True)
class AllDayWindow:
    """Local-date span of an all-day event, end date exclusive."""

    start_date: date
    end_date_exclusive: date
    zone: ZoneInfo

    @property
    def time_min(self) -> datetime:
        """Local midnight starting the first day."""
        return datetime.combine(self.start_date, time.min, tzinfo=self.zone)

    @property
    def time_max(self) -> datetime:
        """Local midnight after the last day."""
        return datetime.combine(self.end_date_exclusive, time.min, tzinfo=self.zone)

    def __str__(self) -> str:  # noqa: D105
        return f"{self.start_date.isoformat()} → {self.end_date_exclusive.isoformat()}"


def to_all_day_window(start: datetime, end: datetime, tz_name: str) -> AllDayWindow:
    """Convert an inclusive time-off period into an all-day event window.

    Both instants are moved into the user's zone and truncated to local
    dates. Clockify periods include their last day while all-day events
    end exclusively, so one calendar day is added to the end date.

    Args:
        start: Period start (aware)
        end: Period end, inclusive (aware)
        tz_name: IANA zone of the requesting user

    Raises:
        UnknownTimeZoneError: If tz_name cannot be resolved
    """
    zone = resolve_zone(tz_name)
    start_date = start.astimezone(zone).date()
    end_date = end.astimezone(zone).date()
    return AllDayWindow(
        start_date=start_date,
        end_date_exclusive=end_date + timedelta(days=1),
        zone=zone,
    )


def make_event_summary(request: TimeOffRequest) -> str:
    """Create event summary from a time-off request."""
    if request.policy_name:
        return f"{EVENT_SUMMARY} — {request.policy_name}"
    return EVENT_SUMMARY


def make_event_description(request: TimeOffRequest) -> str:
    """Create event description linking back to the Clockify request."""
    return f"Clockify request: {request.id}\nCreatedAt: {request.created_at}"


def make_event_body(request: TimeOffRequest, window: AllDayWindow) -> dict:
    """Build the Calendar v3 insert body for a time-off request."""
    return {
        "summary": make_event_summary(request),
        "description": make_event_description(request),
        "start": {"date": window.start_date.isoformat()},
        "end": {"date": window.end_date_exclusive.isoformat()},
        "extendedProperties": {"private": {CORRELATION_PROPERTY: request.id}},
    }


class OutcomeStatus(enum.StrEnum):
    """What happened to one request on one calendar."""

    INSERTED = "inserted"
    WOULD_INSERT = "would_insert"
    SKIPPED_EXISTING = "skipped_existing"
    FAILED = "failed"


class FailureKind(enum.StrEnum):
    """Why a request could not be synced."""

    UNKNOWN_TIME_ZONE = "unknown_time_zone"
    INVALID_PERIOD = "invalid_period"
    CALENDAR_UNAVAILABLE = "calendar_unavailable"
    LOOKUP_FAILED = "lookup_failed"
    INSERT_FAILED = "insert_failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of syncing one request to one calendar.

    ``calendar_id`` is None when the request failed before any calendar
    was touched (bad zone, bad period, no calendar client).
    """

    request_id: str
    user_email: str
    status: OutcomeStatus
    calendar_id: str | None = None
    failure: FailureKind | None = None
    detail: str = ""
    event_id: str | None = None
    existing_count: int = 0

    @property
    def is_failure(self) -> bool:
        """Whether this outcome counts as an error."""
        return self.status == OutcomeStatus.FAILED

    def __str__(self) -> str:  # noqa: D105
        where = f"req={self.request_id} user={self.user_email} cal={self.calendar_id or '-'}"
        if self.status == OutcomeStatus.FAILED:
            return f"FAILED ({self.failure}) {where}: {self.detail}"
        if self.status == OutcomeStatus.SKIPPED_EXISTING:
            return f"SKIPPED existing {where} eventId={self.event_id} ({self.detail})"
        if self.status == OutcomeStatus.WOULD_INSERT:
            return f"WOULD INSERT {where} ({self.detail})"
        return f"INSERTED {where} ({self.detail})"


@dataclass
class SyncResult:
    """Aggregated result of a sync batch."""

    outcomes: list[SyncOutcome] = field(default_factory=list)

    def add(self, outcome: SyncOutcome) -> None:
        """Record an outcome."""
        self.outcomes.append(outcome)

    @property
    def inserted(self) -> int:
        """Number of events inserted."""
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.INSERTED)

    @property
    def skipped(self) -> int:
        """Number of requests already on the calendar."""
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.SKIPPED_EXISTING)

    @property
    def would_insert(self) -> int:
        """Number of events a dry run left uninserted."""
        return sum(1 for o in self.outcomes if o.status == OutcomeStatus.WOULD_INSERT)

    @property
    def duplicates(self) -> int:
        """Number of lookups that matched more than one event."""
        return sum(1 for o in self.outcomes if o.existing_count > 1)

    @property
    def errors(self) -> list[str]:
        """One entry per failed outcome."""
        return [str(o) for o in self.outcomes if o.is_failure]

    @property
    def ok(self) -> bool:
        """True when nothing failed."""
        return not self.errors

    def __str__(self) -> str:  # noqa: D105
        parts = [f"{self.inserted} inserted", f"{self.skipped} skipped"]
        if self.would_insert:
            parts.append(f"{self.would_insert} would insert")
        if self.duplicates:
            parts.append(f"{self.duplicates} with duplicates")
        parts.append(f"{len(self.errors)} errors")
        return ", ".join(parts)
