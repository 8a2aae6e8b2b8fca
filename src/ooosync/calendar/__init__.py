"""Calendar sync of Clockify time-off as all-day OOO events."""

from ooosync.calendar.models import (
    AllDayWindow,
    FailureKind,
    OutcomeStatus,
    SyncOutcome,
    SyncResult,
    to_all_day_window,
)
from ooosync.calendar.sync import OOOCalendarSync

__all__ = [
    "AllDayWindow",
    "FailureKind",
    "OOOCalendarSync",
    "OutcomeStatus",
    "SyncOutcome",
    "SyncResult",
    "to_all_day_window",
]
