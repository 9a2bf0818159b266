"""
Booking and contract status state machines.

Statuses are closed enums; every status change goes through
`ensure_transition`, which checks the explicit transition table and raises
a ValidationError for anything not listed.

Booking:
    pending   -> confirmed | cancelled | completed
    confirmed -> confirmed | cancelled | completed   (re-confirm restamps)
    completed -> cancelled
    cancelled -> (terminal)

Contract:
    draft     -> sent | signed | cancelled            (signing may skip sent)
    sent      -> sent | signed | cancelled
    signed    -> cancelled
    cancelled -> cancelled                            (re-cancel is not guarded)
"""

import enum

from conference_center.core.exceptions import ValidationError


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def is_active(self) -> bool:
        """Active bookings occupy their facility and block overlapping ones."""
        return self in ACTIVE_BOOKING_STATUSES


class ContractStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    SIGNED = "signed"
    CANCELLED = "cancelled"

    @property
    def is_frozen(self) -> bool:
        return self in FROZEN_CONTRACT_STATUSES


ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})
FROZEN_CONTRACT_STATUSES = frozenset({ContractStatus.SIGNED, ContractStatus.CANCELLED})

BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
}

CONTRACT_TRANSITIONS: dict[ContractStatus, frozenset[ContractStatus]] = {
    ContractStatus.DRAFT: frozenset({ContractStatus.SENT, ContractStatus.SIGNED, ContractStatus.CANCELLED}),
    ContractStatus.SENT: frozenset({ContractStatus.SENT, ContractStatus.SIGNED, ContractStatus.CANCELLED}),
    ContractStatus.SIGNED: frozenset({ContractStatus.CANCELLED}),
    ContractStatus.CANCELLED: frozenset({ContractStatus.CANCELLED}),
}


def can_transition(current: enum.Enum, target: enum.Enum) -> bool:
    if isinstance(current, BookingStatus):
        table = BOOKING_TRANSITIONS
    elif isinstance(current, ContractStatus):
        table = CONTRACT_TRANSITIONS
    else:
        raise TypeError(f"Unknown status type: {type(current).__name__}")
    return target in table[current]


def ensure_transition(current: enum.Enum, target: enum.Enum, entity: str) -> None:
    if not can_transition(current, target):
        raise ValidationError(
            f"Cannot move {entity} from {current.value} to {target.value}.",
            current=current.value,
            target=target.value,
        )
