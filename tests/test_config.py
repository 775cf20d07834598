"""Tests for configuration loading and validation."""

from dataclasses import FrozenInstanceError, replace

import pytest

from booking_core.config import (
    AppConfig,
    BookingRules,
    BusinessHours,
    _safe_int,
    _safe_int_set,
    _validate_config,
)


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(AppConfig())  # should not raise

    def test_empty_working_days(self):
        config = AppConfig(rules=BookingRules(working_days=frozenset()))
        with pytest.raises(ValueError, match="WORKING_DAYS"):
            _validate_config(config)

    def test_weekday_out_of_range(self):
        config = AppConfig(rules=BookingRules(working_days=frozenset({1, 7})))
        with pytest.raises(ValueError, match="WORKING_DAYS"):
            _validate_config(config)

    def test_invalid_cutoff_hour(self):
        config = AppConfig(rules=BookingRules(same_day_cutoff_hour=25))
        with pytest.raises(ValueError, match="SAME_DAY_CUTOFF_HOUR"):
            _validate_config(config)

    def test_negative_advance(self):
        config = AppConfig(rules=BookingRules(same_day_min_advance_minutes=-5))
        with pytest.raises(ValueError, match="SAME_DAY_MIN_ADVANCE_MINUTES"):
            _validate_config(config)

    def test_zero_default_duration(self):
        config = AppConfig(rules=BookingRules(default_service_duration_minutes=0))
        with pytest.raises(ValueError, match="DEFAULT_SERVICE_DURATION"):
            _validate_config(config)

    def test_start_after_end(self):
        config = AppConfig(hours=BusinessHours(start_hour=18, end_hour=9))
        with pytest.raises(ValueError, match="BUSINESS_START_HOUR"):
            _validate_config(config)

    def test_zero_interval(self):
        config = AppConfig(hours=BusinessHours(interval_minutes=0))
        with pytest.raises(ValueError, match="SLOT_INTERVAL_MINUTES"):
            _validate_config(config)

    def test_unknown_timezone(self):
        config = replace(AppConfig(), timezone="Mars/Olympus_Mons")
        with pytest.raises(ValueError, match="BUSINESS_TIMEZONE"):
            _validate_config(config)


class TestEnvParsing:
    def test_safe_int_parsing(self):
        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_invalid(self, monkeypatch):
        monkeypatch.setenv("BOOKING_TEST_INT", "ten")
        with pytest.raises(ValueError, match="BOOKING_TEST_INT"):
            _safe_int("BOOKING_TEST_INT", "1")

    def test_safe_int_set_default(self):
        assert _safe_int_set("NONEXISTENT_VAR_12345", {1, 2}) == {1, 2}

    def test_safe_int_set_from_env(self, monkeypatch):
        monkeypatch.setenv("BOOKING_TEST_DAYS", "1, 3,5")
        assert _safe_int_set("BOOKING_TEST_DAYS", {0}) == {1, 3, 5}

    def test_safe_int_set_invalid(self, monkeypatch):
        monkeypatch.setenv("BOOKING_TEST_DAYS", "mon,tue")
        with pytest.raises(ValueError, match="BOOKING_TEST_DAYS"):
            _safe_int_set("BOOKING_TEST_DAYS", {0})


class TestImmutability:
    def test_rules_are_frozen(self, rules):
        with pytest.raises(FrozenInstanceError):
            rules.same_day_cutoff_hour = 20

    def test_with_working_days_returns_new_value(self, rules):
        barber_rules = rules.with_working_days([2, 4])
        assert barber_rules.working_days == {2, 4}
        assert rules.working_days == {1, 2, 3, 4, 5, 6}
        assert barber_rules.same_day_cutoff_hour == rules.same_day_cutoff_hour

    def test_is_working_day(self, rules):
        assert rules.is_working_day(1)
        assert not rules.is_working_day(0)

    def test_business_hours_minutes(self, hours):
        assert hours.work_start == 540
        assert hours.work_end == 1080
