"""Data models for Clockify time-off requests."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import AliasPath, BaseModel, ConfigDict, Field, field_validator

VALID_STATUSES = frozenset({"PENDING", "APPROVED", "REJECTED", "ALL"})


class TimeOffRequest(BaseModel):
    """A single time-off request as returned by Clockify.

    Only the fields the calendar sync consumes are modelled; everything
    else in the API record is ignored. ``id`` is required because it is the
    correlation key written into calendar events.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(min_length=1)
    created_at: str = Field(default="", alias="createdAt")
    policy_name: str = Field(default="", alias="policyName")
    user_email: str = Field(default="", alias="userEmail")
    user_time_zone: str = Field(default="", alias="userTimeZone")
    period_start: str = Field(
        default="", validation_alias=AliasPath("timeOffPeriod", "period", "start")
    )
    period_end: str = Field(
        default="", validation_alias=AliasPath("timeOffPeriod", "period", "end")
    )

    @field_validator("policy_name", "user_email", "user_time_zone", mode="before")
    @classmethod
    def _none_as_empty(cls, v: str | None) -> str | None:
        return "" if v is None else v

    @classmethod
    def from_api(cls, data: dict) -> TimeOffRequest:
        """Create from API response data."""
        return cls.model_validate(data)


class CreatedAtOnly(BaseModel):
    """Projection of a request record down to its creation timestamp."""

    created_at: str = Field(alias="createdAt")


def normalize_statuses(statuses: list[str]) -> list[str]:
    """Trim and upper-case status names, dropping empty entries."""
    return [s.strip().upper() for s in statuses if s and s.strip()]


@dataclass
class TimeOffQuery:
    """Body of a Clockify time-off request search.

    ``start``/``end`` must already be in the Clockify wire format
    (see ``ooosync.core.timeparse.format_for_source_api``).
    """

    start: str | None = None
    end: str | None = None
    page: int = 1
    page_size: int = 50
    statuses: list[str] = field(default_factory=list)
    users: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:  # noqa: D105
        self.statuses = normalize_statuses(self.statuses)

    def to_api(self) -> dict:
        """Convert to API request format, omitting unset fields."""
        payload: dict = {}
        if self.start:
            payload["start"] = self.start
        if self.end:
            payload["end"] = self.end
        if self.page:
            payload["page"] = self.page
        if self.page_size:
            payload["pageSize"] = self.page_size
        if self.statuses:
            payload["statuses"] = self.statuses
        if self.users:
            payload["users"] = self.users
        return payload
