"""
ISO-8601 date parsing helpers.
"""

from datetime import datetime, timezone
from typing import Optional

from .errors import InvalidArgument


def parse_date(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime; naive input is taken as UTC."""
    if not value:
        raise InvalidArgument("date_string", "Date string cannot be null or empty")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidArgument(
            "date_string",
            f"Date string '{value}' was not recognized as a valid ISO 8601 DateTime."
        ) from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def try_parse_date(value: Optional[str], default: datetime) -> datetime:
    """Parse like ``parse_date`` but return ``default`` instead of raising."""
    try:
        return parse_date(value)
    except InvalidArgument:
        return default
