"""
Centralized booking configuration with environment variable overrides.

Business hours, same-day rules and default service duration live here.
Nothing in the scheduling code hardcodes them; every computation takes
these values as arguments and falls back to ``settings`` when omitted.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_WORKING_DAYS = frozenset({1, 2, 3, 4, 5, 6})  # Monday..Saturday, 0 = Sunday


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_int_set(env_var: str, default: Iterable[int]) -> frozenset[int]:
    """Parse a comma separated list of integers, e.g. ``WORKING_DAYS=1,2,3``."""
    raw = os.getenv(env_var)
    if raw is None or not raw.strip():
        return frozenset(default)
    try:
        return frozenset(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BookingRules:
    """Business policy for accepting bookings. Immutable once loaded."""

    working_days: frozenset[int] = _safe_int_set("WORKING_DAYS", DEFAULT_WORKING_DAYS)
    same_day_cutoff_hour: int = _safe_int("SAME_DAY_CUTOFF_HOUR", "16")
    same_day_min_advance_minutes: int = _safe_int("SAME_DAY_MIN_ADVANCE_MINUTES", "120")
    default_service_duration_minutes: int = _safe_int("DEFAULT_SERVICE_DURATION", "30")

    def with_working_days(self, days: Iterable[int]) -> "BookingRules":
        """Return a copy with different working days (e.g. per barber).

        Raises ValueError on an empty set or a weekday outside 0..6.
        """
        working_days = frozenset(days)
        if not working_days:
            raise ValueError("working_days must name at least one weekday")
        bad_days = sorted(d for d in working_days if not 0 <= d <= 6)
        if bad_days:
            raise ValueError(f"working_days must be between 0 and 6, got {bad_days}")
        return replace(self, working_days=working_days)

    def is_working_day(self, weekday: int) -> bool:
        """``weekday`` uses 0 = Sunday .. 6 = Saturday."""
        return weekday in self.working_days


@dataclass(frozen=True)
class BusinessHours:
    """Opening window and base slot granularity for one day."""

    start_hour: int = _safe_int("BUSINESS_START_HOUR", "9")
    end_hour: int = _safe_int("BUSINESS_END_HOUR", "18")
    interval_minutes: int = _safe_int("SLOT_INTERVAL_MINUTES", "30")

    @property
    def work_start(self) -> int:
        return self.start_hour * 60

    @property
    def work_end(self) -> int:
        return self.end_hour * 60


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    rules: BookingRules = field(default_factory=BookingRules)
    hours: BusinessHours = field(default_factory=BusinessHours)
    timezone: str = os.getenv("BUSINESS_TIMEZONE", "UTC")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    rules = config.rules
    hours = config.hours

    if not rules.working_days:
        raise ValueError("WORKING_DAYS must name at least one weekday")
    bad_days = sorted(d for d in rules.working_days if not 0 <= d <= 6)
    if bad_days:
        raise ValueError(f"WORKING_DAYS must be between 0 and 6, got {bad_days}")
    if not 0 <= rules.same_day_cutoff_hour <= 24:
        raise ValueError(
            f"SAME_DAY_CUTOFF_HOUR must be between 0 and 24, got {rules.same_day_cutoff_hour}"
        )
    if rules.same_day_min_advance_minutes < 0:
        raise ValueError(
            "SAME_DAY_MIN_ADVANCE_MINUTES must be >= 0, "
            f"got {rules.same_day_min_advance_minutes}"
        )
    if rules.default_service_duration_minutes < 1:
        raise ValueError(
            "DEFAULT_SERVICE_DURATION must be >= 1, "
            f"got {rules.default_service_duration_minutes}"
        )

    if not 0 <= hours.start_hour < hours.end_hour <= 24:
        raise ValueError(
            "BUSINESS_START_HOUR must be before BUSINESS_END_HOUR within 0..24, "
            f"got {hours.start_hour}..{hours.end_hour}"
        )
    if hours.interval_minutes < 1:
        raise ValueError(
            f"SLOT_INTERVAL_MINUTES must be >= 1, got {hours.interval_minutes}"
        )

    try:
        ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown BUSINESS_TIMEZONE: {config.timezone!r}") from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Booking rules loaded: days=%s hours=%02d-%02d tz=%s",
        sorted(config.rules.working_days),
        config.hours.start_hour,
        config.hours.end_hour,
        config.timezone,
    )
    return config


# Singleton instance
settings = load_config()
