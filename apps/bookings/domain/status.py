"""
Booking State Machine

    pending -> confirmed -> active -> completed
       |           |          |
       +-----------+----------+--> cancelled

``completed`` and ``cancelled`` are terminal. Every status change, whichever
endpoint requested it, goes through :func:`ensure_transition`.
"""

from typing import Dict, FrozenSet

from apps.bookings.exceptions import InvalidStatusTransition

PENDING = 'pending'
CONFIRMED = 'confirmed'
ACTIVE = 'active'
COMPLETED = 'completed'
CANCELLED = 'cancelled'

TERMINAL: FrozenSet[str] = frozenset({COMPLETED, CANCELLED})

ALLOWED_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({ACTIVE, CANCELLED}),
    ACTIVE: frozenset({COMPLETED, CANCELLED}),
    COMPLETED: frozenset(),
    CANCELLED: frozenset(),
}

# Status values that hold inventory in reserved
HOLDS_INVENTORY: FrozenSet[str] = frozenset({PENDING, CONFIRMED, ACTIVE})

_VERBS = {
    CONFIRMED: 'confirmed',
    ACTIVE: 'activated',
    COMPLETED: 'completed',
    CANCELLED: 'cancelled',
}


def can_transition(current: str, target: str) -> bool:
    return str(target) in ALLOWED_TRANSITIONS.get(str(current), frozenset())


def ensure_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidStatusTransition(
            f"Booking cannot be {_VERBS.get(target, target)} in current status",
            details={'current_status': str(current), 'requested_status': str(target)},
        )
