"""Date and time utilities.

HTTP dates (``Last-Modified`` / ``If-Modified-Since``) are RFC 1123 strings.
They are parsed once and re-rendered in canonical GMT form so the token sent
back to the server is always well formed.
"""

from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime


def utcnow() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(tz=UTC)


def parse_http_date(value: str | None) -> datetime | None:
    """Parse an RFC 1123 date header.

    Args:
        value: Header value, e.g. ``"Tue, 15 Nov 1994 08:12:31 GMT"``.

    Returns:
        An aware UTC datetime, or None if the value is missing or malformed.
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_http_date(value: datetime) -> str:
    """Render a datetime as a canonical RFC 1123 GMT string."""
    return format_datetime(value.astimezone(UTC), usegmt=True)


def file_timestamp(value: datetime) -> str:
    """ISO-like timestamp safe for use in file names, e.g. ``2024-01-02T03-04-05Z``."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H-%M-%SZ")
