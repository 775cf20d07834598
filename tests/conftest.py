"""Shared test fixtures and helpers."""

from datetime import datetime, timezone
from typing import Optional

import pytest

from booking_core.config import BookingRules, BusinessHours
from booking_core.scheduling.state_machine import ReservationStateMachine

DAY = "2025-01-15"  # a Wednesday


@pytest.fixture
def rules():
    return BookingRules(
        working_days=frozenset({1, 2, 3, 4, 5, 6}),
        same_day_cutoff_hour=16,
        same_day_min_advance_minutes=120,
        default_service_duration_minutes=30,
    )


@pytest.fixture
def hours():
    return BusinessHours(start_hour=9, end_hour=18, interval_minutes=30)


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def other_day_now():
    """A "now" well before DAY, so same-day rules never apply."""
    return datetime(2025, 1, 10, 8, 0)


@pytest.fixture
def reservation():
    return ReservationStateMachine()


def ts_booking(start: str, end: str, day: str = DAY, duration: Optional[int] = None) -> dict:
    """Helper to create a timestamp-pair booking row in UTC."""
    row = {"start_ts": f"{day}T{start}:00Z", "end_ts": f"{day}T{end}:00Z"}
    if duration is not None:
        row["duration"] = duration
    return row


def local_booking(time: str, duration: Optional[int] = None, **extra) -> dict:
    """Helper to create a local "HH:MM" + duration booking row."""
    row = {"time": time}
    if duration is not None:
        row["duration"] = duration
    row.update(extra)
    return row
