"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created and its inventory reserved
    """
    booking_id: UUID
    booking_number: str
    customer_id: int
    total: Decimal
    currency: str


@dataclass
class BookingConfirmed(DomainEvent):
    """
    Event: Booking confirmed (PENDING -> CONFIRMED)

    Triggers:
    - In-app confirmation notification for the customer
    """
    booking_id: UUID
    booking_number: str
    customer_id: int


@dataclass
class BookingActivated(DomainEvent):
    """Event: Items handed over to the customer (CONFIRMED -> ACTIVE)"""
    booking_id: UUID
    booking_number: str
    customer_id: int


@dataclass
class BookingCompleted(DomainEvent):
    """
    Event: Items returned (ACTIVE -> COMPLETED), inventory released
    """
    booking_id: UUID
    booking_number: str
    customer_id: int
    late_return: bool = False


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking cancelled, inventory released

    Triggers:
    - In-app cancellation notification for the customer
    """
    booking_id: UUID
    booking_number: str
    customer_id: int
    reason: str = ''
    cancelled_by: int | None = None
