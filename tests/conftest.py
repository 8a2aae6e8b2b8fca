"""Shared pytest fixtures."""

import base64
import json

import pytest

from ooosync.clockify.models import TimeOffRequest

SERVICE_ACCOUNT_INFO = {
    "type": "service_account",
    "project_id": "test-project",
    "client_email": "ooo-sync@test-project.iam.gserviceaccount.com",
    "token_uri": "https://oauth2.googleapis.com/token",
}


def make_request_data(
    request_id: str = "req-1",
    tz: str = "America/New_York",
    start: str = "2025-12-10T00:00:00Z",
    end: str = "2025-12-10T23:59:59Z",
    created_at: str = "2025-12-01T12:00:00Z",
    policy_name: str = "Vacation",
    user_email: str = "fixture@example.com",
) -> dict:
    """Build a Clockify time-off request record as the API returns it."""
    return {
        "id": request_id,
        "createdAt": created_at,
        "policyName": policy_name,
        "userEmail": user_email,
        "userTimeZone": tz,
        "status": {"statusType": "APPROVED"},
        "timeOffPeriod": {"period": {"start": start, "end": end}, "halfDay": False},
    }


def make_request(**kwargs) -> TimeOffRequest:
    """Build a decoded TimeOffRequest."""
    return TimeOffRequest.from_api(make_request_data(**kwargs))


def make_envelope(*items: dict) -> bytes:
    """Encode records into a Clockify search response body."""
    return json.dumps({"count": len(items), "requests": list(items)}).encode()


class FakeCalendarService:
    """In-memory calendar that remembers inserted events across calls."""

    def __init__(self) -> None:
        self.events: dict[str, list[dict]] = {}
        self.list_calls: list[tuple] = []
        self.insert_calls: list[tuple[str, dict]] = []
        self.fail_list = False
        self.fail_insert = False

    def list_events(self, calendar_id, private_property, time_min, time_max):
        self.list_calls.append((calendar_id, private_property, time_min, time_max))
        if self.fail_list:
            raise RuntimeError("lookup boom")
        name, value = private_property
        return [
            event
            for event in self.events.get(calendar_id, [])
            if event.get("extendedProperties", {}).get("private", {}).get(name) == value
        ]

    def insert_event(self, calendar_id, body):
        self.insert_calls.append((calendar_id, body))
        if self.fail_insert:
            raise RuntimeError("insert boom")
        event = {**body, "id": f"evt-{len(self.insert_calls)}"}
        self.events.setdefault(calendar_id, []).append(event)
        return event


@pytest.fixture
def fake_calendar():
    """A persistent in-memory calendar shared by every impersonated user."""
    return FakeCalendarService()


@pytest.fixture
def calendar_factory(fake_calendar):
    """Factory returning the fake calendar and recording who was impersonated."""

    def factory(user_email: str) -> FakeCalendarService:
        factory.users.append(user_email)
        return fake_calendar

    factory.users = []
    return factory


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set mock environment variables for testing."""
    encoded = base64.b64encode(json.dumps(SERVICE_ACCOUNT_INFO).encode()).decode()
    monkeypatch.setenv("CLOCKIFY_API_KEY", "test-api-key")
    monkeypatch.setenv("WORKSPACE_ID", "ws-123")
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_JSON_B64", encoded)
    monkeypatch.setenv("CLOCKIFY_BASE_URL", "https://clockify.test/api/v1")
    monkeypatch.delenv("CLOCKIFY_FORCE_USER_ID", raising=False)
    monkeypatch.delenv("OOO_CALENDAR_IDS", raising=False)
