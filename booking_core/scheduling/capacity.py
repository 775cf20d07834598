"""
Day capacity: the largest free contiguous block within business hours.

Used as a cheap pre-check ("can this date fit a 90 minute service at
all?") before building per-slot output. Same-day rules push the earliest
usable minute forward, and past the cutoff hour today has no capacity.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from booking_core.config import BookingRules, BusinessHours, settings
from booking_core.scheduling.intervals import BookingInterval, BookingLike, merge_intervals, normalize_bookings
from booking_core.utils import parse_iso_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayCapacity:
    """Capacity verdict for one date. Recompute after any booking change."""
    max_gap_minutes: int
    required_duration_minutes: int

    @property
    def has_gap(self) -> bool:
        return self.has_capacity_for(self.required_duration_minutes)

    def has_capacity_for(self, duration_minutes: int) -> bool:
        return self.max_gap_minutes >= duration_minutes

    def as_dict(self) -> dict:
        return {"max_gap": self.max_gap_minutes, "has_gap": self.has_gap}


def current_time(tz: Optional[tzinfo] = None) -> datetime:
    """Now in the business timezone."""
    return datetime.now(tz or settings.tzinfo)


def local_now(now: Optional[datetime], tz: Optional[tzinfo] = None) -> datetime:
    """Normalize an injected ``now`` to naive business-local time."""
    tz = tz or settings.tzinfo
    if now is None:
        now = current_time(tz)
    elif now.tzinfo is not None:
        now = now.astimezone(tz)
    return now.replace(tzinfo=None)


def earliest_start_minutes(
    day: date,
    now: datetime,
    rules: BookingRules,
    hours: BusinessHours,
) -> int:
    """
    First minute of ``day`` that can still be booked.

    Today: at least ``now + same_day_min_advance_minutes``, and the whole
    day is closed once the cutoff hour has been reached. ``now`` must be
    naive business-local time.
    """
    earliest = hours.work_start
    if day != now.date():
        return earliest
    if now.hour >= rules.same_day_cutoff_hour:
        return hours.work_end
    now_minutes = now.hour * 60 + now.minute
    return max(earliest, now_minutes + rules.same_day_min_advance_minutes)


def max_free_gap(
    intervals: Iterable[BookingInterval],
    work_start: int,
    work_end: int,
    earliest_start: Optional[int] = None,
) -> int:
    """Size in minutes of the largest free span in ``[work_start, work_end)``."""
    earliest = work_start if earliest_start is None else earliest_start
    cursor = work_start
    max_gap = 0

    for block in merge_intervals(intervals):
        if block.end_minutes <= earliest:
            cursor = max(cursor, block.end_minutes)
            continue
        gap_start = max(cursor, earliest)
        gap_end = min(block.start_minutes, work_end)
        if gap_end > gap_start:
            max_gap = max(max_gap, gap_end - gap_start)
        cursor = max(cursor, block.end_minutes)

    tail_start = max(cursor, earliest)
    if work_end > tail_start:
        max_gap = max(max_gap, work_end - tail_start)
    return max_gap


def compute_day_capacity(
    date,
    bookings: Iterable[BookingLike],
    required_duration: Optional[int] = None,
    rules: Optional[BookingRules] = None,
    hours: Optional[BusinessHours] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> DayCapacity:
    """
    Compute the largest free block for ``date`` ("YYYY-MM-DD").

    Bookings without an end or duration count as ``default_service_duration``.
    ``now`` defaults to the current business-local time. An unparsable
    date reports zero capacity.
    """
    rules = rules or settings.rules
    hours = hours or settings.hours
    tz = tz or settings.tzinfo
    required = rules.default_service_duration_minutes if required_duration is None else required_duration

    day = parse_iso_date(date)
    if day is None:
        logger.warning("Unparsable date %r; reporting zero capacity", date)
        return DayCapacity(max_gap_minutes=0, required_duration_minutes=required)

    intervals = normalize_bookings(
        bookings, day, default_duration=rules.default_service_duration_minutes, tz=tz,
    )
    earliest = earliest_start_minutes(day, local_now(now, tz), rules, hours)
    gap = max_free_gap(intervals, hours.work_start, hours.work_end, earliest)

    logger.debug(
        "Capacity %s: max_gap=%d required=%d earliest=%d",
        day.isoformat(), gap, required, earliest,
    )
    return DayCapacity(max_gap_minutes=gap, required_duration_minutes=required)
