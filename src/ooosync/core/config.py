"""Configuration loading utilities."""

import base64
import binascii
import json
import os

from dotenv import load_dotenv

DEFAULT_CALENDAR_IDS = ("primary",)


class SetupError(ValueError):
    """Required configuration or parameters are missing or invalid.

    Raised before any request processing starts. Entry points decide how
    to surface it (exit code for the CLI, exception or HTTP 400 for the
    function app).
    """


def get_clockify_credentials() -> tuple[str, str]:
    """Get Clockify API credentials from environment.

    Returns:
        Tuple of (api_key, workspace_id)

    Raises:
        SetupError: If any required credential is not set
    """
    load_dotenv()

    api_key = os.getenv("CLOCKIFY_API_KEY")
    workspace_id = os.getenv("WORKSPACE_ID")

    if not api_key or not workspace_id:
        raise SetupError("Clockify credentials not set. Required: CLOCKIFY_API_KEY, WORKSPACE_ID")

    return api_key, workspace_id


def get_google_service_account_info() -> dict:
    """Get the Google service account key from environment.

    The key JSON is stored base64 encoded in GOOGLE_SERVICE_ACCOUNT_JSON_B64
    so it survives being pasted into app settings.

    Returns:
        Parsed service account key (the dict form of the JSON key file)

    Raises:
        SetupError: If the variable is missing or does not decode to JSON
    """
    load_dotenv()

    encoded = os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON_B64")
    if not encoded:
        raise SetupError(
            "Google service account not set. Required: GOOGLE_SERVICE_ACCOUNT_JSON_B64"
        )

    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise SetupError(f"invalid base64 GOOGLE_SERVICE_ACCOUNT_JSON_B64: {e}") from e

    try:
        info = json.loads(raw)
    except ValueError as e:
        raise SetupError(f"GOOGLE_SERVICE_ACCOUNT_JSON_B64 is not valid JSON: {e}") from e

    if not isinstance(info, dict):
        raise SetupError("GOOGLE_SERVICE_ACCOUNT_JSON_B64 must decode to a JSON object")

    return info


def get_clockify_base_url() -> str | None:
    """Get an optional Clockify API base URL override (CLOCKIFY_BASE_URL)."""
    load_dotenv()
    return os.getenv("CLOCKIFY_BASE_URL") or None


def get_forced_user_id() -> str | None:
    """Get the single-user override for non-production runs.

    When CLOCKIFY_FORCE_USER_ID is set, only that Clockify user's requests
    are fetched.
    """
    load_dotenv()
    return os.getenv("CLOCKIFY_FORCE_USER_ID") or None


def get_calendar_ids() -> tuple[str, ...]:
    """Get target calendar IDs from OOO_CALENDAR_IDS (comma separated).

    Defaults to the impersonated user's primary calendar.
    """
    load_dotenv()

    value = os.getenv("OOO_CALENDAR_IDS", "")
    calendar_ids = tuple(c.strip() for c in value.split(",") if c.strip())
    return calendar_ids or DEFAULT_CALENDAR_IDS
