"""
Payment Domain Events

Published after commit by the unit of work.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent


@dataclass
class PaymentSucceeded(DomainEvent):
    """
    Event: Payment confirmed, booking marked as paid

    Triggers:
    - In-app payment receipt for the customer
    """
    payment_id: UUID
    booking_id: UUID
    booking_number: str
    customer_id: int
    amount: Decimal
    currency: str


@dataclass
class PaymentRefunded(DomainEvent):
    """Event: Payment refunded, fully or partially"""
    payment_id: UUID
    booking_id: UUID
    customer_id: int
    amount: Decimal
    currency: str
    full_refund: bool
