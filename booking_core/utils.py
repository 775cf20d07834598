"""Shared time and text helpers used across the availability engine."""

import re
import unicodedata
from datetime import date, datetime
from typing import Optional

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::(\d{2}))?\s*$")


def parse_time_to_minutes(value: str) -> Optional[int]:
    """Convert "HH:MM" (or "HH:MM:SS") to minutes since midnight.

    Returns None for anything that is not a valid time of day.

    Examples:
        >>> parse_time_to_minutes("09:30")
        570
        >>> parse_time_to_minutes("18:00:00")
        1080
        >>> parse_time_to_minutes("25:00") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = _TIME_RE.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_iso_date(value) -> Optional[date]:
    """Parse a "YYYY-MM-DD" string (or pass a date through). None when invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def sunday_based_weekday(day: date) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday (Python uses 0 = Monday)."""
    return (day.weekday() + 1) % 7


def strip_accents(value: str) -> str:
    """Lowercase and drop diacritics: "Miércoles" -> "miercoles"."""
    decomposed = unicodedata.normalize("NFKD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
