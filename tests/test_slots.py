"""Tests for slot grid generation and duration-aware service slots."""

from datetime import timedelta, timezone

from booking_core.config import BusinessHours
from booking_core.scheduling.intervals import BookingInterval
from booking_core.scheduling.slots import (
    build_availability_slots,
    build_service_slots,
    build_slots,
    filter_available_times,
)
from tests.conftest import DAY, local_booking, ts_booking


def _by_time(slots):
    return {slot.time: slot.available for slot in slots}


class TestBaseGrid:
    def test_single_booking_day(self, hours):
        slots = build_availability_slots([ts_booking("10:00", "10:30", duration=30)], DAY, hours)
        assert len(slots) == 18
        assert slots[0].time == "09:00"
        assert slots[0].available
        assert _by_time(slots)["10:00"] is False

        available = filter_available_times(slots)
        assert "10:00" not in available
        assert "09:00" in available

    def test_touching_slot_before_booking_is_available(self, hours):
        slots = build_availability_slots([ts_booking("10:00", "10:30")], DAY, hours)
        assert _by_time(slots)["09:30"] is True
        assert _by_time(slots)["10:30"] is True

    def test_never_emits_slot_ending_after_closing(self, hours):
        times = [slot.time for slot in build_availability_slots([], DAY, hours)]
        assert "18:00" not in times
        assert times[-1] == "17:30"

    def test_output_is_ascending(self, hours):
        times = [slot.time for slot in build_availability_slots([], DAY, hours)]
        assert times == sorted(times)

    def test_empty_bookings_all_available(self, hours):
        slots = build_availability_slots([], DAY, hours)
        assert all(slot.available for slot in slots)

    def test_partial_trailing_slot_not_generated(self):
        hours = BusinessHours(start_hour=9, end_hour=10, interval_minutes=25)
        times = [slot.time for slot in build_availability_slots([], DAY, hours)]
        assert times == ["09:00", "09:25"]

    def test_build_slots_from_intervals(self, hours):
        slots = build_slots([BookingInterval(600, 630)], hours)
        assert _by_time(slots)["10:00"] is False
        assert _by_time(slots)["09:30"] is True


class TestOverlapScenarios:
    def setup_method(self):
        self.hours = BusinessHours(start_hour=11, end_hour=13, interval_minutes=15)
        self.bookings = [
            ts_booking("11:00", "11:30", duration=30),
            ts_booking("12:15", "12:45", duration=30),
        ]

    def test_partial_overlap_is_unavailable(self):
        slots = _by_time(build_availability_slots(self.bookings, DAY, self.hours))
        assert slots["11:15"] is False

    def test_exact_start_is_unavailable(self):
        slots = _by_time(build_availability_slots(self.bookings, DAY, self.hours))
        assert slots["12:15"] is False

    def test_gaps_between_bookings_are_available(self):
        slots = _by_time(build_availability_slots(self.bookings, DAY, self.hours))
        assert slots["11:30"] is True
        assert slots["11:45"] is True
        assert slots["12:00"] is True
        assert slots["12:45"] is True

    def test_grid_size(self):
        assert len(build_availability_slots(self.bookings, DAY, self.hours)) == 8


class TestBookingRowForms:
    def test_local_time_with_duration(self, hours):
        slots = _by_time(build_availability_slots([local_booking("10:00", 45)], DAY, hours))
        assert slots["10:00"] is False
        assert slots["10:30"] is False
        assert slots["11:00"] is True

    def test_local_time_without_duration_uses_interval(self, hours):
        slots = _by_time(build_availability_slots([local_booking("10:00")], DAY, hours))
        assert slots["10:00"] is False
        assert slots["10:30"] is True

    def test_legacy_column_names(self, hours):
        row = {"hora_inicio": "10:00:00", "hora_fin": "11:00:00", "estado": "confirmada"}
        slots = _by_time(build_availability_slots([row], DAY, hours))
        assert slots["10:00"] is False
        assert slots["10:30"] is False
        assert slots["11:00"] is True

    def test_timestamp_converted_to_business_timezone(self, hours):
        santiago_summer = timezone(timedelta(hours=-3))
        row = {"start_ts": f"{DAY}T13:00:00Z", "end_ts": f"{DAY}T13:30:00Z"}
        slots = _by_time(build_availability_slots([row], DAY, hours, tz=santiago_summer))
        assert slots["10:00"] is False
        assert slots["13:00"] is True

    def test_booking_on_other_day_does_not_block(self, hours):
        row = ts_booking("10:00", "10:30", day="2025-01-16")
        slots = build_availability_slots([row], DAY, hours)
        assert all(slot.available for slot in slots)


class TestMalformedInput:
    def test_malformed_rows_are_skipped(self, hours):
        rows = [
            {"end_ts": f"{DAY}T10:00:00Z"},
            {"time": "not-a-time", "duration": 30},
            ts_booking("11:00", "10:00"),
            {"time": "12:00", "duration": "abc"},
            {"time": "13:00", "duration": 0},
            {},
        ]
        slots = build_availability_slots(rows, DAY, hours)
        assert all(slot.available for slot in slots)

    def test_unparsable_end_time_skips_row(self, hours):
        rows = [
            {"time": "10:00", "end_time": "99:99", "duration": 240},
            {"hora_inicio": "14:00", "hora_fin": "late"},
        ]
        slots = _by_time(build_availability_slots(rows, DAY, hours))
        assert slots["10:00"] is True
        assert slots["11:00"] is True
        assert slots["14:00"] is True

    def test_bad_row_does_not_hide_good_row(self, hours):
        rows = [{"time": "garbage"}, local_booking("10:00", 30)]
        assert _by_time(build_availability_slots(rows, DAY, hours))["10:00"] is False

    def test_inactive_status_ignored(self, hours):
        rows = [
            local_booking("10:00", 30, status="cancelled"),
            local_booking("11:00", 30, status="no_show"),
            local_booking("12:00", 30, status="completed"),
        ]
        slots = build_availability_slots(rows, DAY, hours)
        assert all(slot.available for slot in slots)

    def test_active_status_blocks(self, hours):
        rows = [local_booking("10:00", 30, status="pending")]
        assert _by_time(build_availability_slots(rows, DAY, hours))["10:00"] is False

    def test_invalid_date_reports_everything_unavailable(self, hours):
        slots = build_availability_slots([], "2025-13-45", hours)
        assert len(slots) == 18
        assert not any(slot.available for slot in slots)
        assert filter_available_times(slots) == []


class TestServiceSlots:
    def test_edge_start_after_booking(self, hours):
        starts = build_service_slots([ts_booking("10:00", "10:45", duration=45)], DAY, 45, hours)
        assert "10:45" in starts
        assert "10:30" not in starts
        assert "09:30" not in starts
        assert "09:00" in starts

    def test_last_start_fits_before_closing(self, hours):
        starts = build_service_slots([], DAY, 45, hours)
        assert starts[-1] == "17:00"

    def test_sorted_and_unique(self, hours):
        rows = [local_booking("10:00", 30), local_booking("14:30", 30)]
        starts = build_service_slots(rows, DAY, 30, hours)
        assert starts == sorted(set(starts))

    def test_invalid_date_returns_empty(self, hours):
        assert build_service_slots([], "yesterday", 30, hours) == []
