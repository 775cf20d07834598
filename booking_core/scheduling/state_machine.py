"""
Finite state machine for reservation status changes.

A reservation moves pending -> confirmed -> in_progress -> completed, and
may drop out to cancelled or no_show along the way. Completed, cancelled
and no_show are terminal. Only active reservations occupy a slot.

Usage:
    sm = ReservationStateMachine()
    sm.transition(ReservationStatus.CONFIRMED)
    assert sm.is_active()
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class ReservationStatus(str, Enum):
    """All possible states of a reservation."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"

    @classmethod
    def parse(cls, value: Union[str, "ReservationStatus", None]) -> Optional["ReservationStatus"]:
        """Resolve an English or legacy Spanish status name. None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return _LEGACY_NAMES.get(key)


_LEGACY_NAMES: dict[str, ReservationStatus] = {
    "pendiente": ReservationStatus.PENDING,
    "confirmada": ReservationStatus.CONFIRMED,
    "en_progreso": ReservationStatus.IN_PROGRESS,
    "completada": ReservationStatus.COMPLETED,
    "cancelada": ReservationStatus.CANCELLED,
    "inprogress": ReservationStatus.IN_PROGRESS,
    "noshow": ReservationStatus.NO_SHOW,
}

STATUS_LABELS: dict[ReservationStatus, str] = {
    ReservationStatus.PENDING: "Pending",
    ReservationStatus.CONFIRMED: "Confirmed",
    ReservationStatus.IN_PROGRESS: "In progress",
    ReservationStatus.COMPLETED: "Completed",
    ReservationStatus.CANCELLED: "Cancelled",
    ReservationStatus.NO_SHOW: "No show",
}

TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({
        ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED,
    }),
    ReservationStatus.CONFIRMED: frozenset({
        ReservationStatus.IN_PROGRESS, ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW,
    }),
    ReservationStatus.IN_PROGRESS: frozenset({
        ReservationStatus.COMPLETED, ReservationStatus.CANCELLED,
    }),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
    ReservationStatus.NO_SHOW: frozenset(),
}

ACTIVE_STATUSES = frozenset({
    ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.IN_PROGRESS,
})
TERMINAL_STATUSES = frozenset(s for s, targets in TRANSITIONS.items() if not targets)

StatusLike = Union[ReservationStatus, str]


class InvalidTransitionError(Exception):
    """Raised when a reservation status change is not allowed."""

    def __init__(self, from_status: StatusLike, to_status: StatusLike) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid reservation transition from '{_label(from_status)}' "
            f"to '{_label(to_status)}'"
        )


def _label(status: StatusLike) -> str:
    return status.value if isinstance(status, ReservationStatus) else str(status)


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    """True if ``from_status -> to_status`` is an allowed edge. Unknown names never are."""
    source = ReservationStatus.parse(from_status)
    target = ReservationStatus.parse(to_status)
    if source is None or target is None:
        return False
    return target in TRANSITIONS[source]


def assert_transition(from_status: StatusLike, to_status: StatusLike) -> None:
    """
    Raise ``InvalidTransitionError`` unless the change is allowed.

    Accepting an illegal change would corrupt booking state, so this is the
    one hard failure in the engine.
    """
    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(from_status, to_status)


def is_active_status(status: Optional[StatusLike]) -> bool:
    """Whether a reservation in ``status`` occupies its time slot."""
    parsed = ReservationStatus.parse(status)
    return parsed in ACTIVE_STATUSES


@dataclass
class StatusEntry:
    """Recorded history entry for a status change."""
    status: ReservationStatus
    entered_at: datetime


class ReservationStateMachine:
    """
    Tracks the status of a single reservation.

    Every change goes through ``assert_transition``; rejected changes
    leave the current status and history untouched.
    """

    def __init__(self, initial: StatusLike = ReservationStatus.PENDING) -> None:
        status = ReservationStatus.parse(initial)
        if status is None:
            raise ValueError(f"Unknown reservation status: {initial!r}")
        self._current = status
        self._history: list[StatusEntry] = [
            StatusEntry(status=status, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_status(self) -> ReservationStatus:
        return self._current

    def can_transition(self, to_status: StatusLike) -> bool:
        return can_transition(self._current, to_status)

    def transition(self, to_status: StatusLike) -> ReservationStatus:
        """
        Move to ``to_status``.

        Raises:
            InvalidTransitionError: If the edge is not in the transition table.
        """
        assert_transition(self._current, to_status)
        old = self._current
        self._current = ReservationStatus.parse(to_status)
        self._history.append(StatusEntry(
            status=self._current, entered_at=datetime.now(timezone.utc),
        ))
        logger.debug("Reservation status: %s -> %s", old.value, self._current.value)
        return self._current

    def get_valid_targets(self) -> list[ReservationStatus]:
        """Statuses reachable from the current one, in enum order."""
        allowed = TRANSITIONS[self._current]
        return [s for s in ReservationStatus if s in allowed]

    def get_history(self) -> list[StatusEntry]:
        return list(self._history)

    def get_status_trace(self) -> list[str]:
        """Return ordered list of status names visited."""
        return [entry.status.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current in TERMINAL_STATUSES

    def is_active(self) -> bool:
        return self._current in ACTIVE_STATUSES
