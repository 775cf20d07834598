"""
Normalization of raw booking rows into busy intervals.

Rows arrive either as timestamp pairs (``start_ts``/``end_ts``) or as a
local start time with a duration or explicit end time. Everything is
reduced to minute offsets from local midnight of the queried date.
Malformed rows are skipped so one bad record cannot break a whole day.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import ValidationError

from booking_core.scheduling.state_machine import is_active_status
from booking_core.schemas.booking_schema import RawBooking
from booking_core.utils import parse_time_to_minutes

logger = logging.getLogger(__name__)

BookingLike = Union[RawBooking, Mapping[str, Any]]


@dataclass(frozen=True, order=True)
class BookingInterval:
    """A busy ``[start_minutes, end_minutes)`` range on one day."""
    start_minutes: int
    end_minutes: int

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes


def _coerce(row: BookingLike) -> Optional[RawBooking]:
    if isinstance(row, RawBooking):
        return row
    try:
        return RawBooking.model_validate(row)
    except ValidationError as exc:
        logger.debug("Skipping malformed booking row %r: %s", row, exc.errors())
        return None


def _minutes_from_midnight(ts: datetime, day: date, tz: Optional[tzinfo]) -> int:
    if ts.tzinfo is not None and tz is not None:
        ts = ts.astimezone(tz)
    ts = ts.replace(tzinfo=None)
    delta = ts - datetime.combine(day, time.min)
    return int(delta.total_seconds() // 60)


def to_interval(
    row: BookingLike,
    day: date,
    default_duration: int,
    tz: Optional[tzinfo] = None,
) -> Optional[BookingInterval]:
    """
    Convert one row into a BookingInterval, or None when it constrains nothing.

    ``default_duration`` applies to local-time rows that carry neither an
    end time nor a duration. Inactive statuses (cancelled, no_show,
    completed) yield None.
    """
    booking = _coerce(row)
    if booking is None:
        return None
    if booking.status is not None and not is_active_status(booking.status):
        return None

    start: Optional[int] = None
    end: Optional[int] = None

    if booking.start_ts is not None:
        start = _minutes_from_midnight(booking.start_ts, day, tz)
        if booking.end_ts is not None:
            end = _minutes_from_midnight(booking.end_ts, day, tz)
        elif booking.duration is not None:
            end = start + booking.duration
    elif booking.time is not None:
        start = parse_time_to_minutes(booking.time)
        if start is not None:
            if booking.end_time:
                end = parse_time_to_minutes(booking.end_time)
                if end is None:
                    logger.debug("Skipping booking with unparsable end time: %r", row)
                    return None
            elif booking.duration is not None:
                end = start + booking.duration
            else:
                end = start + default_duration

    if start is None or end is None or end <= start:
        logger.debug("Skipping booking without a usable interval: %r", row)
        return None
    return BookingInterval(start, end)


def normalize_bookings(
    rows: Iterable[BookingLike],
    day: date,
    default_duration: int,
    tz: Optional[tzinfo] = None,
) -> list[BookingInterval]:
    """Convert rows to intervals, dropping malformed and inactive ones. Input order is kept."""
    intervals = []
    for row in rows or ():
        interval = to_interval(row, day, default_duration, tz)
        if interval is not None:
            intervals.append(interval)
    return intervals


def merge_intervals(intervals: Iterable[BookingInterval]) -> list[BookingInterval]:
    """
    Sort and merge overlapping or touching intervals into disjoint busy blocks.

    The result does not depend on input order.
    """
    merged: list[BookingInterval] = []
    for interval in sorted(intervals):
        if merged and interval.start_minutes <= merged[-1].end_minutes:
            last = merged[-1]
            if interval.end_minutes > last.end_minutes:
                merged[-1] = BookingInterval(last.start_minutes, interval.end_minutes)
        else:
            merged.append(interval)
    return merged
