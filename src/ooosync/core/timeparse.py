"""Timestamp parsing and formatting for Clockify time-off data.

Clockify returns instants in several shapes (with or without fractional
seconds, sometimes date-only), so parsing tries a fixed list of formats in
order and normalizes everything to UTC.
"""

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

# Fractional seconds beyond microseconds are truncated; datetime can't hold them.
_RFC3339_FRACTION = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.(\d{1,9})(Z|[+-]\d{2}:\d{2})$"
)
_RFC3339 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(Z|[+-]\d{2}:\d{2})$")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Clockify range filters expect YYYY-MM-DDTHH:MM:SS.ssssssZ (microseconds).
SOURCE_API_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _parse_rfc3339_fraction(s: str) -> datetime:
    match = _RFC3339_FRACTION.match(s)
    if not match:
        raise ValueError(f"time data {s!r} does not match RFC3339 with fractional seconds")
    base, fraction, offset = match.groups()
    micros = fraction[:6].ljust(6, "0")
    return datetime.strptime(f"{base}.{micros}{offset}", "%Y-%m-%dT%H:%M:%S.%f%z")


def _parse_rfc3339(s: str) -> datetime:
    if not _RFC3339.match(s):
        raise ValueError(f"time data {s!r} does not match RFC3339")
    return datetime.strptime(s, "%Y-%m-%dT%H:%M:%S%z")


def _parse_date_only(s: str) -> datetime:
    if not _DATE_ONLY.match(s):
        raise ValueError(f"time data {s!r} does not match format 'YYYY-MM-DD'")
    return datetime.strptime(s, "%Y-%m-%d").replace(tzinfo=UTC)


ACCEPTED_FORMATS: tuple[tuple[str, Callable[[str], datetime]], ...] = (
    ("rfc3339-nano", _parse_rfc3339_fraction),
    ("rfc3339", _parse_rfc3339),
    ("date", _parse_date_only),
)


def parse_instant(s: str) -> datetime:
    """Parse a timestamp in any accepted format and return it in UTC.

    Formats are tried in order: RFC3339 with fractional seconds, plain
    RFC3339, then date-only (midnight UTC).

    Raises:
        ValueError: The error from the last attempted format when none match.
            Earlier failures are only logged at debug level.
    """
    errors: list[ValueError] = []
    for name, parse in ACCEPTED_FORMATS:
        try:
            return parse(s).astimezone(UTC)
        except ValueError as e:
            logger.debug(f"{s!r} is not {name}: {e}")
            errors.append(e)
    raise errors[-1]


def format_for_source_api(instant: datetime) -> str:
    """Render an aware datetime the way Clockify range filters expect."""
    return instant.astimezone(UTC).strftime(SOURCE_API_FORMAT)


def parse_and_format_for_source_api(s: str) -> str:
    """Parse any accepted timestamp and re-render it for Clockify.

    Raises:
        ValueError: If the string cannot be parsed
    """
    try:
        instant = parse_instant(s)
    except ValueError as e:
        raise ValueError(f"cannot parse time {s!r}: {e}") from e
    return format_for_source_api(instant)
