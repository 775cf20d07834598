from booking_core.schemas.booking_schema import (
    AvailableDay,
    ConflictInterval,
    MonthAvailability,
    RawBooking,
    Slot,
    SlotCheck,
    UnavailableDay,
)

__all__ = [
    "RawBooking",
    "Slot",
    "SlotCheck",
    "ConflictInterval",
    "AvailableDay",
    "UnavailableDay",
    "MonthAvailability",
]
