"""Clockify time-off API client."""

import logging
from typing import Self

import httpx

from ooosync.clockify.models import TimeOffQuery

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.clockify.me/api/v1"
DEFAULT_TIMEOUT = 30.0


class ClockifyAPIError(Exception):
    """Clockify answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        """Keep status and body for diagnostics."""
        super().__init__(f"non-2xx status: {status_code} {reason}\n{body}")
        self.status_code = status_code
        self.body = body


class ClockifyClient:
    """HTTP client for the Clockify time-off API.

    Use as a context manager to ensure the connection pool is closed.

    Example:
        with ClockifyClient(api_key) as client:
            raw = client.fetch_time_off_requests(workspace_id, TimeOffQuery())
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Clockify API key, sent as X-Api-Key
            base_url: API root, defaults to the public Clockify API
            timeout: Bound on each whole request in seconds (default 30)
        """
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._timeout = timeout
        self.client: httpx.Client | None = None

    def __enter__(self) -> Self:
        """Enter context manager - create HTTP client."""
        self.client = httpx.Client(
            timeout=self._timeout,
            headers={"X-Api-Key": self.api_key},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - close HTTP client."""
        if self.client:
            self.client.close()
            self.client = None

    def _require_client(self) -> httpx.Client:
        if not self.client:
            raise RuntimeError("Client must be used as context manager")
        return self.client

    def fetch_time_off_requests(self, workspace_id: str, query: TimeOffQuery) -> bytes:
        """Search time-off requests in a workspace.

        The raw body is returned undecoded so callers can filter records
        without dropping fields the models don't know about.

        Raises:
            ClockifyAPIError: On a non-2xx response
            httpx.HTTPError: On network failure or timeout
        """
        client = self._require_client()
        url = f"{self.base_url}/workspaces/{workspace_id}/time-off/requests"
        payload = query.to_api()

        logger.debug(f"POST {url} {payload}")
        response = client.post(url, json=payload)

        if not response.is_success:
            logger.error(f"Time-off search failed: {response.status_code}")
            raise ClockifyAPIError(response.status_code, response.reason_phrase, response.text)

        logger.info(f"Fetched time-off requests ({len(response.content)} bytes)")
        return response.content
