"""Clockify time-off API integration."""

from ooosync.clockify.client import ClockifyAPIError, ClockifyClient
from ooosync.clockify.filter import SourceResponseError, filter_by_created_at
from ooosync.clockify.models import TimeOffQuery, TimeOffRequest

__all__ = [
    "ClockifyAPIError",
    "ClockifyClient",
    "SourceResponseError",
    "TimeOffQuery",
    "TimeOffRequest",
    "filter_by_created_at",
]
