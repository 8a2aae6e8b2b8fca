"""Filter Clockify time-off responses by request creation time.

Filtering happens in two stages. Each record is first projected down to its
``createdAt`` field and bounds-checked while still a plain dict, then the
survivors are fully decoded. A record whose shape has drifted therefore
costs only itself, never the batch.
"""

import json
import logging
from datetime import datetime

from pydantic import ValidationError

from ooosync.clockify.models import CreatedAtOnly, TimeOffRequest
from ooosync.core.timeparse import parse_instant

logger = logging.getLogger(__name__)


class SourceResponseError(ValueError):
    """The top-level Clockify response envelope could not be decoded."""


def decode_envelope(raw: bytes | str) -> list[dict]:
    """Decode the ``{count, requests}`` envelope into raw request records.

    Records stay as plain dicts so unknown fields survive. Non-object
    entries are dropped.

    Raises:
        SourceResponseError: If the body is not JSON or has no request list
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise SourceResponseError(f"decode: {e}") from e

    if not isinstance(data, dict):
        raise SourceResponseError("decode: response is not a JSON object")

    requests = data.get("requests") or []
    if not isinstance(requests, list):
        raise SourceResponseError("decode: 'requests' is not a list")

    items = []
    for index, item in enumerate(requests):
        if not isinstance(item, dict):
            logger.warning(f"Skipping request #{index}: not a JSON object")
            continue
        items.append(item)
    return items


def _created_at(item: dict) -> datetime | None:
    """Extract and parse the creation instant, or None if unusable."""
    try:
        projection = CreatedAtOnly.model_validate(item)
    except ValidationError:
        logger.warning(f"Skipping request {item.get('id')!r}: no usable createdAt")
        return None

    try:
        return parse_instant(projection.created_at)
    except ValueError as e:
        logger.warning(
            f"Skipping request {item.get('id')!r}: bad createdAt {projection.created_at!r}: {e}"
        )
        return None


def select_by_created_at(
    raw: bytes | str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[dict]:
    """Keep raw records created within ``[start, end)``.

    A missing bound leaves that side open. Records with a missing or
    unparseable ``createdAt`` are dropped and logged.

    Returns:
        Matching records as plain dicts, in response order
    """
    selected = []
    for item in decode_envelope(raw):
        created = _created_at(item)
        if created is None:
            continue
        if start is not None and created < start:
            continue
        if end is not None and created >= end:
            continue
        selected.append(item)
    return selected


def decode_requests(items: list[dict]) -> list[TimeOffRequest]:
    """Fully decode raw records, dropping (and logging) malformed ones."""
    requests = []
    for item in items:
        try:
            requests.append(TimeOffRequest.from_api(item))
        except ValidationError as e:
            logger.warning(f"Skipping bad request {item.get('id')!r}: {e}")
    return requests


def filter_by_created_at(
    raw: bytes | str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[TimeOffRequest]:
    """Select records created within ``[start, end)`` and decode them.

    Raises:
        SourceResponseError: If the response envelope is malformed
    """
    return decode_requests(select_by_created_at(raw, start, end))


def render_envelope(items: list[dict]) -> dict:
    """Wrap raw records back into the ``{count, requests}`` envelope."""
    return {"count": len(items), "requests": items}
