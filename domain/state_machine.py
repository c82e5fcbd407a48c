"""Reservation state machine.

Every legal status change is listed in TRANSITIONS. An operation mapped to
``None`` keeps the current status (update) or removes the record (delete).
Anything not in the table is rejected with InvalidTransitionError.
"""
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Optional, Tuple

from domain.enums import ReservationOperation, ReservationStatus
from domain.exceptions import InvalidTransitionError

ACTIVE_STATUSES: FrozenSet[ReservationStatus] = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
    ReservationStatus.CHECKED_IN,
})

TERMINAL_STATUSES: FrozenSet[ReservationStatus] = frozenset({
    ReservationStatus.CHECKED_OUT,
    ReservationStatus.CANCELLED,
})

CANCELLABLE_STATUSES: FrozenSet[ReservationStatus] = frozenset({
    ReservationStatus.PENDING,
    ReservationStatus.CONFIRMED,
})

TRANSITIONS: Dict[ReservationOperation, Tuple[FrozenSet[ReservationStatus], Optional[ReservationStatus]]] = {
    ReservationOperation.CONFIRM: (frozenset({ReservationStatus.PENDING}), ReservationStatus.CONFIRMED),
    ReservationOperation.CHECK_IN: (frozenset({ReservationStatus.CONFIRMED}), ReservationStatus.CHECKED_IN),
    ReservationOperation.CHECK_OUT: (frozenset({ReservationStatus.CHECKED_IN}), ReservationStatus.CHECKED_OUT),
    ReservationOperation.CANCEL: (CANCELLABLE_STATUSES, ReservationStatus.CANCELLED),
    ReservationOperation.UPDATE: (CANCELLABLE_STATUSES, None),
    ReservationOperation.DELETE: (frozenset({ReservationStatus.CANCELLED}), None),
}

INITIAL_STATUS = ReservationStatus.PENDING

# Each status either blocks availability or is terminal, never both.
assert ACTIVE_STATUSES.isdisjoint(TERMINAL_STATUSES)
assert ACTIVE_STATUSES | TERMINAL_STATUSES == frozenset(ReservationStatus)


def is_active(status: ReservationStatus) -> bool:
    """Whether a reservation in this status blocks its resource"""
    return status in ACTIVE_STATUSES


def is_cancellable(status: ReservationStatus) -> bool:
    return status in CANCELLABLE_STATUSES


def can_apply(operation: ReservationOperation, status: ReservationStatus) -> bool:
    if operation not in TRANSITIONS:
        return False
    allowed_from, _ = TRANSITIONS[operation]
    return status in allowed_from


def ensure_transition(operation: ReservationOperation, status: ReservationStatus) -> None:
    """Raise InvalidTransitionError unless ``operation`` is legal from ``status``"""
    if not can_apply(operation, status):
        raise InvalidTransitionError(operation, status)


def target_status(operation: ReservationOperation, status: ReservationStatus) -> ReservationStatus:
    """Status a reservation ends up in after ``operation``; guards first"""
    ensure_transition(operation, status)
    _, target = TRANSITIONS[operation]
    return target if target is not None else status


def ensure_check_in_window(status: ReservationStatus, scheduled_check_in: datetime,
                           now: datetime, early_window: timedelta) -> None:
    """Reject a check-in attempted earlier than ``early_window`` before the stay starts"""
    ensure_transition(ReservationOperation.CHECK_IN, status)
    opens_at = scheduled_check_in - early_window
    if now < opens_at:
        raise InvalidTransitionError(
            ReservationOperation.CHECK_IN,
            status,
            reason=f"check-in opens at {opens_at.isoformat()}",
        )
