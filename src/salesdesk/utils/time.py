"""Date/time parsing for request parameters and imported rows."""

from datetime import date, datetime, timezone


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO 8601 date or datetime into a naive UTC datetime.

    Accepts ``YYYY-MM-DD`` (midnight of that day), full datetimes, and a
    trailing ``Z`` or numeric UTC offset. Aware values are converted to UTC
    and stripped of tzinfo so they compare against stored naive UTC values.

    Raises:
        ValueError: If the value is not a recognisable ISO 8601 date
    """
    text = value.strip()
    if not text:
        raise ValueError("empty date string")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid ISO 8601 date: {value!r}") from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def format_day(value: date | datetime | None) -> str:
    """Render the calendar day of a date/datetime as YYYY-MM-DD."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
