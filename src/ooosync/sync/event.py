"""Parameters of a sync run, from CLI flags, a trigger payload or environment."""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ooosync.clockify.models import VALID_STATUSES, normalize_statuses
from ooosync.core.config import SetupError
from ooosync.core.timeparse import format_for_source_api

FILTER_MODES = ("period", "created")

DEFAULT_LOOKBACK_HOURS = 24
DEFAULT_PERIOD_DAYS = 365


class SyncEvent(BaseModel):
    """A sync run request.

    Field aliases match the JSON payload accepted by the function app:
    ``{"start", "end", "createdStart", "createdEnd", "statuses", "by",
    "pageSize"}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    start: str = ""
    end: str = ""
    created_start: str = Field(default="", alias="createdStart")
    created_end: str = Field(default="", alias="createdEnd")
    statuses: list[str] = Field(default_factory=list)
    by: str = ""
    page: int = 1
    page_size: int = Field(default=0, alias="pageSize")

    @classmethod
    def from_json(cls, payload: str | bytes | dict | None) -> SyncEvent:
        """Parse a trigger payload. An empty payload yields an empty event.

        Raises:
            SetupError: If the payload is not a valid event
        """
        if not payload:
            return cls()
        try:
            if isinstance(payload, dict):
                return cls.model_validate(payload)
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise SetupError(f"invalid JSON event: {e}") from e

    @property
    def filters_by_created(self) -> bool:
        """Whether this run filters by creation time (and therefore syncs)."""
        return self.by == "created" and bool(self.created_start or self.created_end)

    def validate_for_run(self) -> None:
        """Check parameter combinations before anything touches the network.

        Raises:
            SetupError: On the first invalid parameter
        """
        if self.page_size <= 0:
            raise SetupError("invalid pageSize: must be > 0")
        if self.page < 1:
            raise SetupError("invalid page: must be >= 1")
        if not self.by:
            raise SetupError("missing required parameter: by")
        if self.by not in FILTER_MODES:
            raise SetupError("invalid by: must be 'period' or 'created'")

        statuses = normalize_statuses(self.statuses)
        if not statuses:
            raise SetupError("missing or empty statuses list")
        for status in statuses:
            if status not in VALID_STATUSES:
                raise SetupError(
                    f"invalid statuses value: {status!r} "
                    "(must be one of PENDING, APPROVED, REJECTED, ALL)"
                )

        if self.by == "created" and (not self.start or not self.end):
            raise SetupError("when by=created is used, both start and end must be provided")


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise SetupError(f"{name} must be an integer, got {value!r}") from e


def load_default_sync_event(now: datetime | None = None) -> SyncEvent:
    """Build the event for scheduled runs from environment.

    Scheduled runs sync requests created in the last OOO_SYNC_LOOKBACK_HOURS
    (default 24) whose period overlaps OOO_SYNC_PERIOD_DAYS (default 365)
    either side of now.

    Environment variables:
        OOO_SYNC_BY: Filter mode (default "created")
        OOO_SYNC_STATUSES: Comma-separated statuses (default "APPROVED")
        OOO_SYNC_PAGE_SIZE: Page size (default 50)
        OOO_SYNC_LOOKBACK_HOURS: Created-at window length
        OOO_SYNC_PERIOD_DAYS: Half-width of the period search window
    """
    load_dotenv()

    now = (now or datetime.now(UTC)).astimezone(UTC)
    lookback = timedelta(hours=_int_env("OOO_SYNC_LOOKBACK_HOURS", DEFAULT_LOOKBACK_HOURS))
    period = timedelta(days=_int_env("OOO_SYNC_PERIOD_DAYS", DEFAULT_PERIOD_DAYS))
    by = os.getenv("OOO_SYNC_BY", "created")

    return SyncEvent(
        start=format_for_source_api(now - period),
        end=format_for_source_api(now + period),
        created_start=format_for_source_api(now - lookback),
        created_end=format_for_source_api(now),
        statuses=os.getenv("OOO_SYNC_STATUSES", "APPROVED").split(","),
        by=by,
        page_size=_int_env("OOO_SYNC_PAGE_SIZE", 50),
    )
