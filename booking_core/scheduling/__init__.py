from booking_core.scheduling.capacity import DayCapacity, compute_day_capacity
from booking_core.scheduling.calendar_view import check_slot, is_date_available, summarize_month
from booking_core.scheduling.edge_slots import rebuild_edge_slots
from booking_core.scheduling.intervals import BookingInterval, merge_intervals, normalize_bookings
from booking_core.scheduling.overlap import overlaps
from booking_core.scheduling.slots import (
    build_availability_slots,
    build_service_slots,
    build_slots,
    filter_available_times,
)
from booking_core.scheduling.state_machine import (
    InvalidTransitionError,
    ReservationStateMachine,
    ReservationStatus,
    assert_transition,
    can_transition,
)
from booking_core.scheduling.working_days import resolve_working_days

__all__ = [
    "BookingInterval",
    "normalize_bookings",
    "merge_intervals",
    "overlaps",
    "build_slots",
    "build_availability_slots",
    "build_service_slots",
    "filter_available_times",
    "DayCapacity",
    "compute_day_capacity",
    "rebuild_edge_slots",
    "is_date_available",
    "check_slot",
    "summarize_month",
    "resolve_working_days",
    "ReservationStatus",
    "ReservationStateMachine",
    "InvalidTransitionError",
    "can_transition",
    "assert_transition",
]
