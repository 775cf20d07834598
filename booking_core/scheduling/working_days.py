"""Resolve a barber's configured working-day names into weekday numbers."""

import logging
from typing import Iterable, Optional

from booking_core.config import DEFAULT_WORKING_DAYS, BookingRules, settings
from booking_core.utils import strip_accents

logger = logging.getLogger(__name__)

# 0 = Sunday .. 6 = Saturday. Keys are accent-free lowercase.
DAY_NAMES: dict[str, int] = {
    "domingo": 0,
    "lunes": 1,
    "martes": 2,
    "miercoles": 3,
    "jueves": 4,
    "viernes": 5,
    "sabado": 6,
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}


def resolve_working_days(
    day_names: Optional[Iterable[str]] = None,
    rules: Optional[BookingRules] = None,
) -> frozenset[int]:
    """
    Map day names ("Lunes", "miércoles", "Saturday") to weekday numbers.

    Unrecognized names are ignored. When nothing is recognized the rules'
    default working days are returned, so the result is never empty.
    """
    rules = rules or settings.rules
    resolved: set[int] = set()
    unknown: list[str] = []

    for name in day_names or ():
        if not isinstance(name, str):
            continue
        key = strip_accents(name)
        if key in DAY_NAMES:
            resolved.add(DAY_NAMES[key])
        else:
            unknown.append(name)

    if unknown:
        logger.debug("Ignoring unrecognized working-day names: %s", unknown)
    if not resolved:
        return frozenset(rules.working_days or DEFAULT_WORKING_DAYS)
    return frozenset(resolved)
