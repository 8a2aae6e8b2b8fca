"""Google Calendar API client wrapper."""

import logging
from collections.abc import Callable
from datetime import datetime

from google.oauth2 import service_account
from googleapiclient.discovery import build

from ooosync.core.config import SetupError, get_google_service_account_info

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]

# Small but >1 so duplicates are visible
LOOKUP_MAX_RESULTS = 10


class GoogleCalendarService:
    """Calendar operations for a single impersonated user.

    Events are plain dicts in the Calendar v3 resource shape.
    """

    def __init__(self, service) -> None:
        """Wrap a discovery-built ``calendar`` v3 resource."""
        self.service = service

    def list_events(
        self,
        calendar_id: str,
        private_property: tuple[str, str],
        time_min: datetime,
        time_max: datetime,
    ) -> list[dict]:
        """List non-deleted events carrying a private extended property."""
        name, value = private_property
        result = (
            self.service.events()
            .list(
                calendarId=calendar_id,
                privateExtendedProperty=f"{name}={value}",
                timeMin=time_min.isoformat(),
                timeMax=time_max.isoformat(),
                singleEvents=True,
                showDeleted=False,
                maxResults=LOOKUP_MAX_RESULTS,
            )
            .execute()
        )
        return result.get("items", [])

    def insert_event(self, calendar_id: str, body: dict) -> dict:
        """Insert an event and return the created resource."""
        return self.service.events().insert(calendarId=calendar_id, body=body).execute()


def get_calendar_service_factory(
    service_account_info: dict | None = None,
) -> Callable[[str], GoogleCalendarService]:
    """Create a factory that returns calendar handles acting as a given user.

    The service account key is parsed once; each call to the factory only
    derives delegated credentials via ``with_subject`` and builds a client.

    Args:
        service_account_info: Parsed key JSON. Read from environment if omitted.

    Raises:
        SetupError: If the key is missing or not a usable service account key
    """
    if service_account_info is None:
        service_account_info = get_google_service_account_info()

    try:
        base_credentials = service_account.Credentials.from_service_account_info(
            service_account_info, scopes=SCOPES
        )
    except (KeyError, ValueError) as e:
        raise SetupError(f"invalid Google service account key: {e}") from e

    def for_user(user_email: str) -> GoogleCalendarService:
        credentials = base_credentials.with_subject(user_email)
        service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        logger.debug(f"Built calendar client for {user_email}")
        return GoogleCalendarService(service)

    return for_user
