"""ISO-8601 validation and normalisation for caller-supplied dates."""

from datetime import date, datetime, timezone
from typing import Optional

from .errors import ValidationError

DATE_EXAMPLE = "2026-03-15"


def _date_only(text: str) -> Optional[date]:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse ISO-8601 text into an aware datetime.

    A bare date means UTC midnight, as JavaScript reads it; a datetime
    without an offset is local time. Raises ValueError for anything
    fromisoformat rejects.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("empty date")
    text = value.strip()
    day = _date_only(text)
    if day is not None:
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def to_utc_iso(moment: datetime) -> str:
    """Format like JavaScript's Date.toISOString(): UTC, milliseconds, trailing Z."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(value: str, label: str) -> str:
    """
    Validate a caller date and return it as a UTC ISO string for the script.

    Args:
        value: Caller-supplied ISO-8601 text
        label: Human name of the field for the error message ("due date")

    Raises:
        ValidationError: naming the field and showing a valid example
    """
    try:
        return to_utc_iso(parse_iso_datetime(value))
    except (ValueError, TypeError, OverflowError, OSError):
        raise ValidationError(
            f"Invalid {label}: \"{value}\". Use ISO 8601 format (e.g., '{DATE_EXAMPLE}')."
        ) from None


def normalize_optional_date(value: Optional[str], label: str) -> Optional[str]:
    """Like normalize_date, but None passes through (used for explicit clears)."""
    if value is None:
        return None
    return normalize_date(value, label)
