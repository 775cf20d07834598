"""
Calendar-level availability: whole dates, single requested starts, months.

These compose the slot, capacity and working-day pieces into the answers
a booking calendar asks for. All inputs are plain data; callers fetch
bookings and blocks themselves and pass them in.
"""

import calendar
from datetime import date as date_type
from datetime import datetime, tzinfo
from typing import Container, Iterable, Mapping, Optional

from booking_core.config import BookingRules, BusinessHours, settings
from booking_core.logging_context import get_request_logger
from booking_core.scheduling.capacity import DayCapacity, earliest_start_minutes, local_now
from booking_core.scheduling.intervals import BookingLike, normalize_bookings
from booking_core.scheduling.overlap import find_conflicts
from booking_core.scheduling.slots import free_starts
from booking_core.schemas.booking_schema import (
    AvailableDay,
    ConflictInterval,
    MonthAvailability,
    SlotCheck,
    UnavailableDay,
)
from booking_core.utils import format_minutes, parse_iso_date, parse_time_to_minutes, sunday_based_weekday

logger = get_request_logger(__name__)


def _is_blocked(day: date_type, blocked_dates: Optional[Container]) -> bool:
    if not blocked_dates:
        return False
    return day in blocked_dates or day.isoformat() in blocked_dates


def is_date_available(
    date,
    working_days: Optional[Iterable[int]] = None,
    blocked_dates: Optional[Container] = None,
    capacity: Optional[DayCapacity] = None,
    rules: Optional[BookingRules] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    Whether ``date`` can be offered in the calendar at all.

    False for unparsable or past dates, non-working weekdays, blocked
    dates, today once the cutoff hour has passed, and days whose
    capacity has no gap for the requested service.
    """
    rules = rules or settings.rules
    day = parse_iso_date(date)
    if day is None:
        return False

    now_local = local_now(now, tz)
    today = now_local.date()
    if day < today:
        return False

    allowed = frozenset(working_days) if working_days is not None else rules.working_days
    if sunday_based_weekday(day) not in allowed:
        return False
    if _is_blocked(day, blocked_dates):
        return False
    if day == today and now_local.hour >= rules.same_day_cutoff_hour:
        return False
    if capacity is not None and not capacity.has_gap:
        return False
    return True


def check_slot(
    date,
    start_time: str,
    duration: int,
    bookings: Iterable[BookingLike],
    rules: Optional[BookingRules] = None,
    hours: Optional[BusinessHours] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> SlotCheck:
    """
    Verify one requested start before creating a booking.

    Advisory only: the write path must re-check atomically, since two
    requests can both see the slot free.
    """
    rules = rules or settings.rules
    hours = hours or settings.hours
    tz = tz or settings.tzinfo

    day = parse_iso_date(date)
    start = parse_time_to_minutes(start_time)
    if day is None or start is None or duration < 1:
        return SlotCheck(
            available=False, date=str(date), start=str(start_time),
            reason="invalid_input", message="Date, start time and duration are required.",
        )

    end = start + duration
    result = {"date": day.isoformat(), "start": format_minutes(start), "end": format_minutes(end)}

    if not rules.is_working_day(sunday_based_weekday(day)):
        return SlotCheck(available=False, reason="not_working_day",
                         message="The business is closed on that day.", **result)

    if start < hours.work_start or end > hours.work_end:
        return SlotCheck(
            available=False, reason="outside_hours",
            message=(
                f"Bookings must fall between {format_minutes(hours.work_start)} "
                f"and {format_minutes(hours.work_end)}."
            ),
            **result,
        )

    now_local = local_now(now, tz)
    if day < now_local.date() or start < earliest_start_minutes(day, now_local, rules, hours):
        return SlotCheck(available=False, reason="too_soon",
                         message="That time is too soon to book.", **result)

    intervals = normalize_bookings(
        bookings, day, default_duration=rules.default_service_duration_minutes, tz=tz,
    )
    conflicts = find_conflicts(start, end, intervals)
    if conflicts:
        logger.info("Slot %s %s conflicts with %d booking(s)", result["date"], result["start"], len(conflicts))
        return SlotCheck(
            available=False, reason="conflict",
            conflicts=[
                ConflictInterval(start=format_minutes(c.start_minutes), end=format_minutes(c.end_minutes))
                for c in conflicts
            ],
            message="The selected time is already taken.",
            **result,
        )

    return SlotCheck(available=True, message="Time available.", **result)


def summarize_month(
    year: int,
    month: int,
    bookings_by_date: Mapping[str, Iterable[BookingLike]],
    duration: Optional[int] = None,
    working_days: Optional[Iterable[int]] = None,
    blocked_dates: Optional[Container] = None,
    rules: Optional[BookingRules] = None,
    hours: Optional[BusinessHours] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> MonthAvailability:
    """
    Classify every day of a month for a service of ``duration`` minutes.

    ``bookings_by_date`` maps "YYYY-MM-DD" to that day's booking rows
    (blocks can be passed as extra rows). Days are unavailable as
    ``past``, ``not_working_day``, ``blocked`` or ``no_slots``.
    """
    rules = rules or settings.rules
    hours = hours or settings.hours
    tz = tz or settings.tzinfo
    duration = rules.default_service_duration_minutes if duration is None else duration
    allowed = frozenset(working_days) if working_days is not None else rules.working_days
    now_local = local_now(now, tz)
    total_days = calendar.monthrange(year, month)[1]

    summary = MonthAvailability(
        year=year, month=month, duration_minutes=duration,
        total_days=total_days, working_days=sorted(allowed),
    )

    for day_number in range(1, total_days + 1):
        day = date_type(year, month, day_number)
        iso = day.isoformat()

        if day < now_local.date():
            reason = "past"
        elif sunday_based_weekday(day) not in allowed:
            reason = "not_working_day"
        elif _is_blocked(day, blocked_dates):
            reason = "blocked"
        else:
            intervals = normalize_bookings(
                bookings_by_date.get(iso, ()), day,
                default_duration=rules.default_service_duration_minutes, tz=tz,
            )
            earliest = earliest_start_minutes(day, now_local, rules, hours)
            starts = free_starts(intervals, duration, hours, earliest_start=earliest)
            if starts:
                summary.available_days.append(AvailableDay(
                    day=day_number, date=iso, slots_count=len(starts),
                    first_slot=format_minutes(starts[0]), last_slot=format_minutes(starts[-1]),
                ))
                continue
            reason = "no_slots"

        summary.unavailable_days.append(UnavailableDay(day=day_number, date=iso, reason=reason))

    logger.info(
        "Month %04d-%02d: %d available, %d unavailable",
        year, month, len(summary.available_days), len(summary.unavailable_days),
    )
    return summary
