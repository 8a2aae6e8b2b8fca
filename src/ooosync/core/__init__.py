"""Core utilities shared by the OOO sync tools."""

from ooosync.core.config import (
    SetupError,
    get_calendar_ids,
    get_clockify_credentials,
    get_google_service_account_info,
)
from ooosync.core.timeparse import format_for_source_api, parse_instant

__all__ = [
    "SetupError",
    "format_for_source_api",
    "get_calendar_ids",
    "get_clockify_credentials",
    "get_google_service_account_info",
    "parse_instant",
]
