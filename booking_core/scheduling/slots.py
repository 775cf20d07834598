"""
Slot generation for calendar display.

Produces the ordered grid of candidate start times for one day and marks
each one available or taken against the day's active bookings.
"""

import logging
from datetime import tzinfo
from typing import Iterable, Optional

from booking_core.config import BusinessHours, settings
from booking_core.scheduling.intervals import BookingInterval, BookingLike, normalize_bookings
from booking_core.scheduling.overlap import first_conflict
from booking_core.schemas.booking_schema import Slot
from booking_core.utils import format_minutes, parse_iso_date

logger = logging.getLogger(__name__)


def grid_starts(start_minutes: int, end_minutes: int, step: int, length: Optional[int] = None):
    """Yield grid starts whose ``[start, start + length)`` ends by ``end_minutes``."""
    length = step if length is None else length
    current = start_minutes
    while current + length <= end_minutes:
        yield current
        current += step


def build_slots(
    intervals: Iterable[BookingInterval],
    hours: Optional[BusinessHours] = None,
) -> list[Slot]:
    """
    Build the base-interval slot grid against already normalized intervals.

    A slot ``[t, t + interval)`` is unavailable as soon as one interval
    overlaps it. No slot ending after closing time is emitted.
    """
    hours = hours or settings.hours
    busy = list(intervals)
    slots = []
    for start in grid_starts(hours.work_start, hours.work_end, hours.interval_minutes):
        end = start + hours.interval_minutes
        available = first_conflict(start, end, busy) is None
        slots.append(Slot(time=format_minutes(start), available=available))
    return slots


def build_availability_slots(
    bookings: Iterable[BookingLike],
    date,
    hours: Optional[BusinessHours] = None,
    tz: Optional[tzinfo] = None,
) -> list[Slot]:
    """
    Build the slot grid for ``date`` ("YYYY-MM-DD") from raw booking rows.

    Local-time rows without a duration occupy one base interval. An
    unparsable date yields the grid with every slot unavailable.
    """
    hours = hours or settings.hours
    day = parse_iso_date(date)
    if day is None:
        logger.warning("Unparsable date %r; reporting every slot unavailable", date)
        return [
            Slot(time=format_minutes(start), available=False)
            for start in grid_starts(hours.work_start, hours.work_end, hours.interval_minutes)
        ]

    intervals = normalize_bookings(
        bookings, day, default_duration=hours.interval_minutes, tz=tz or settings.tzinfo,
    )
    slots = build_slots(intervals, hours)
    logger.debug(
        "Built %d slots for %s against %d booking(s)", len(slots), day.isoformat(), len(intervals)
    )
    return slots


def filter_available_times(slots: Iterable[Slot]) -> list[str]:
    """Times of the available slots, in input order."""
    return [slot.time for slot in slots if slot.available]


def free_starts(
    intervals: Iterable[BookingInterval],
    duration: int,
    hours: Optional[BusinessHours] = None,
    earliest_start: Optional[int] = None,
) -> list[int]:
    """
    Start minutes where a ``duration``-long service fits without conflict.

    Candidates are the base grid plus every booking end inside business
    hours, so a service can start right when the previous one finishes.
    """
    hours = hours or settings.hours
    busy = list(intervals)
    floor = hours.work_start if earliest_start is None else max(hours.work_start, earliest_start)

    candidates = set(grid_starts(hours.work_start, hours.work_end, hours.interval_minutes, duration))
    candidates.update(
        interval.end_minutes for interval in busy
        if hours.work_start <= interval.end_minutes < hours.work_end
    )
    return sorted(
        start for start in candidates
        if start >= floor
        and start + duration <= hours.work_end
        and first_conflict(start, start + duration, busy) is None
    )


def build_service_slots(
    bookings: Iterable[BookingLike],
    date,
    duration: int,
    hours: Optional[BusinessHours] = None,
    tz: Optional[tzinfo] = None,
) -> list[str]:
    """
    Bookable start times for a service of ``duration`` minutes.

    Equivalent to the base grid followed by ``rebuild_edge_slots``, but
    checks the full service length from the start. Unparsable dates
    yield an empty list.
    """
    hours = hours or settings.hours
    day = parse_iso_date(date)
    if day is None or duration < 1:
        logger.warning("Cannot build service slots for date=%r duration=%r", date, duration)
        return []
    intervals = normalize_bookings(
        bookings, day, default_duration=hours.interval_minutes, tz=tz or settings.tzinfo,
    )
    return [format_minutes(start) for start in free_starts(intervals, duration, hours)]
