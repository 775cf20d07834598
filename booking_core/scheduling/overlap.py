"""
Overlap detection between time intervals.

All intervals are half-open ``[start, end)``: back-to-back bookings that
touch at a boundary do not conflict.
"""

from typing import Iterable, Optional, TypeVar

from booking_core.scheduling.intervals import BookingInterval

T = TypeVar("T")


def overlaps(a_start: T, a_end: T, b_start: T, b_end: T) -> bool:
    """
    True when ``[a_start, a_end)`` and ``[b_start, b_end)`` share any point.

    Works for minute offsets and datetimes alike.
    """
    return a_start < b_end and b_start < a_end


def first_conflict(
    start: int, end: int, intervals: Iterable[BookingInterval]
) -> Optional[BookingInterval]:
    """Return the first interval overlapping ``[start, end)``, or None."""
    for interval in intervals:
        if overlaps(start, end, interval.start_minutes, interval.end_minutes):
            return interval
    return None


def find_conflicts(
    start: int, end: int, intervals: Iterable[BookingInterval]
) -> list[BookingInterval]:
    """All intervals overlapping ``[start, end)``, in input order."""
    return [
        interval for interval in intervals
        if overlaps(start, end, interval.start_minutes, interval.end_minutes)
    ]
