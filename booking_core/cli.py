"""
CLI entry point for querying availability from booking export files.

Usage:
    python -m booking_core.cli slots --bookings day.json --date 2025-01-15
    python -m booking_core.cli slots --bookings day.json --date 2025-01-15 --duration 45
    python -m booking_core.cli capacity --bookings day.json --date 2025-01-15 --duration 90
    python -m booking_core.cli edges --bookings day.json --date 2025-01-15 --duration 45
    python -m booking_core.cli month --bookings month.json --year 2025 --month 1 --duration 30
    python -m booking_core.cli transition confirmed no_show
"""

import argparse
import json
import logging
import sys
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional

from booking_core.config import BusinessHours, settings
from booking_core.logging_context import get_request_logger, request_context
from booking_core.scheduling.calendar_view import summarize_month
from booking_core.scheduling.capacity import compute_day_capacity
from booking_core.scheduling.edge_slots import rebuild_edge_slots
from booking_core.scheduling.intervals import normalize_bookings
from booking_core.scheduling.slots import (
    build_availability_slots,
    build_service_slots,
    filter_available_times,
)
from booking_core.scheduling.state_machine import InvalidTransitionError, assert_transition
from booking_core.utils import parse_iso_date

logger = get_request_logger(__name__)


class InputError(Exception):
    """Raised when an input file is missing or not usable JSON."""


def _load_json(path_str: str) -> Any:
    path = Path(path_str)
    if not path.exists():
        raise InputError(f"Bookings file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {path}: {exc}") from None


def _load_rows(path_str: str) -> list:
    data = _load_json(path_str)
    if isinstance(data, dict) and "bookings" in data:
        data = data["bookings"]
    if not isinstance(data, list):
        raise InputError(f"Expected a JSON list of bookings in {path_str}")
    return data


def _hours(args: argparse.Namespace) -> BusinessHours:
    overrides = {
        name: getattr(args, name)
        for name in ("start_hour", "end_hour", "interval_minutes")
        if getattr(args, name, None) is not None
    }
    return replace(settings.hours, **overrides)


def _cmd_slots(args: argparse.Namespace) -> Any:
    rows = _load_rows(args.bookings)
    hours = _hours(args)
    if args.duration:
        return build_service_slots(rows, args.date, args.duration, hours)
    slots = build_availability_slots(rows, args.date, hours)
    if args.available_only:
        return filter_available_times(slots)
    return [slot.model_dump() for slot in slots]


def _cmd_capacity(args: argparse.Namespace) -> Any:
    rows = _load_rows(args.bookings)
    capacity = compute_day_capacity(args.date, rows, args.duration, hours=_hours(args))
    return capacity.as_dict()


def _cmd_edges(args: argparse.Namespace) -> Any:
    rows = _load_rows(args.bookings)
    hours = _hours(args)
    day = parse_iso_date(args.date)
    if day is None:
        raise InputError(f"Invalid date: {args.date!r}")
    base = filter_available_times(build_availability_slots(rows, args.date, hours))
    intervals = normalize_bookings(rows, day, hours.interval_minutes, settings.tzinfo)
    return rebuild_edge_slots(
        base, intervals, args.duration, hours.interval_minutes, hours.work_start, hours.work_end,
    )


def _cmd_month(args: argparse.Namespace) -> Any:
    data = _load_json(args.bookings)
    if not isinstance(data, dict):
        raise InputError(f"Expected a JSON object keyed by date in {args.bookings}")
    summary = summarize_month(args.year, args.month, data, args.duration, hours=_hours(args))
    return summary.model_dump()


def _cmd_transition(args: argparse.Namespace) -> Any:
    assert_transition(args.from_status, args.to_status)
    return {"from": args.from_status, "to": args.to_status, "allowed": True}


def _add_hours_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start-hour", dest="start_hour", type=int, default=None,
                        help="Opening hour (default: BUSINESS_START_HOUR).")
    parser.add_argument("--end-hour", dest="end_hour", type=int, default=None,
                        help="Closing hour (default: BUSINESS_END_HOUR).")
    parser.add_argument("--interval", dest="interval_minutes", type=int, default=None,
                        help="Base slot interval in minutes (default: SLOT_INTERVAL_MINUTES).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute appointment availability from booking JSON files."
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging output.")
    sub = parser.add_subparsers(dest="command", required=True)

    slots = sub.add_parser("slots", help="Slot grid for one date.")
    slots.add_argument("--bookings", required=True, help="JSON list of booking rows.")
    slots.add_argument("--date", required=True, help="Date as YYYY-MM-DD.")
    slots.add_argument("--duration", type=int, default=None,
                       help="Service length; returns start times that fit it.")
    slots.add_argument("--available-only", action="store_true",
                       help="Print only the available times.")
    _add_hours_arguments(slots)
    slots.set_defaults(handler=_cmd_slots)

    capacity = sub.add_parser("capacity", help="Largest free block for one date.")
    capacity.add_argument("--bookings", required=True)
    capacity.add_argument("--date", required=True)
    capacity.add_argument("--duration", type=int, default=None)
    _add_hours_arguments(capacity)
    capacity.set_defaults(handler=_cmd_capacity)

    edges = sub.add_parser("edges", help="Available grid slots plus recovered edge slots.")
    edges.add_argument("--bookings", required=True)
    edges.add_argument("--date", required=True)
    edges.add_argument("--duration", type=int, required=True)
    _add_hours_arguments(edges)
    edges.set_defaults(handler=_cmd_edges)

    month = sub.add_parser("month", help="Available and unavailable days of a month.")
    month.add_argument("--bookings", required=True, help="JSON object mapping dates to rows.")
    month.add_argument("--year", type=int, required=True)
    month.add_argument("--month", type=int, required=True)
    month.add_argument("--duration", type=int, default=None)
    _add_hours_arguments(month)
    month.set_defaults(handler=_cmd_month)

    transition = sub.add_parser("transition", help="Validate a reservation status change.")
    transition.add_argument("from_status")
    transition.add_argument("to_status")
    transition.set_defaults(handler=_cmd_transition)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    with request_context(f"CLI-{uuid.uuid4().hex[:8]}"):
        try:
            output = args.handler(args)
        except InputError as exc:
            logger.error("%s", exc)
            return 1
        except InvalidTransitionError as exc:
            logger.error("%s", exc)
            return 2

    sys.stdout.write(json.dumps(output, indent=2, ensure_ascii=False) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
