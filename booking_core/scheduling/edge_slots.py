"""
Edge-slot recovery for services longer than the base interval.

The base grid marks a slot taken when its fixed-width window touches a
booking, and never offers starts that fall between grid lines. This pass
adds back the starts a longer service can still use: grid positions
that finish right where a booking begins, and the end of each booking.
"""

import logging
from typing import Iterable, Optional

from booking_core.config import BusinessHours, settings
from booking_core.scheduling.intervals import BookingInterval
from booking_core.scheduling.overlap import first_conflict
from booking_core.scheduling.slots import grid_starts
from booking_core.utils import format_minutes

logger = logging.getLogger(__name__)


def rebuild_edge_slots(
    current_slots: Iterable[str],
    bookings: Iterable[BookingInterval],
    required_duration: int,
    base_interval: Optional[int] = None,
    work_start: Optional[int] = None,
    work_end: Optional[int] = None,
) -> list[str]:
    """
    Merge recovered edge starts into ``current_slots``.

    Args:
        current_slots: "HH:MM" starts already offered by the base grid.
        bookings: normalized busy intervals for the day.
        required_duration: length of the requested service in minutes.
        base_interval: grid step; defaults to the configured interval.
        work_start, work_end: business window in minutes since midnight.

    Returns:
        Sorted, de-duplicated "HH:MM" starts.
    """
    hours: BusinessHours = settings.hours
    step = hours.interval_minutes if base_interval is None else base_interval
    start_bound = hours.work_start if work_start is None else work_start
    end_bound = hours.work_end if work_end is None else work_end
    busy = list(bookings)
    result = set(current_slots)

    def fits(start: int) -> bool:
        end = start + required_duration
        return end <= end_bound and first_conflict(start, end, busy) is None

    starts_at = {interval.start_minutes: interval for interval in busy}
    for m in grid_starts(start_bound, end_bound, step):
        matching = starts_at.get(m + step)
        if matching is None:
            continue
        if m + required_duration > matching.start_minutes:
            continue
        if fits(m):
            result.add(format_minutes(m))

    for interval in busy:
        edge = interval.end_minutes
        if start_bound <= edge < end_bound and fits(edge):
            result.add(format_minutes(edge))

    recovered = sorted(result)
    logger.debug(
        "Edge slots for %d min service: %d -> %d start(s)",
        required_duration, len(set(current_slots)), len(recovered),
    )
    return recovered
