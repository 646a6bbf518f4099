"""Payment ledger services.

No external gateway is called: intent and transaction references are
generated locally in the format a gateway would hand out, so a real
provider can be plugged in behind these functions later.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import uuid4

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.exceptions import BookingNotFound, InvalidStatusTransition
from apps.bookings.models import Booking
from shared.application.uow import DjangoUnitOfWork, lock_queryset_if_possible
from shared.domain.exceptions import DomainValidationError
from shared.domain.value_objects import Actor, Money

from .exceptions import InvalidPaymentStatus, PaymentAccessDenied, PaymentNotFound
from .models import Payment, PaymentTransaction

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntent:
    id: str
    amount: int
    currency: str
    status: str = "requires_payment_method"

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "amount": self.amount, "currency": self.currency, "status": self.status}


def _ensure_owner_or_admin(payment: Payment, actor: Actor) -> None:
    if not (actor.is_admin or actor.owns(payment.booking.customer_id)):
        logger.warning(f"User {actor.user_id} denied access to payment {payment.pk}")
        raise PaymentAccessDenied()


def _record(payment: Payment, event: str, payload: dict | None = None) -> None:
    PaymentTransaction.objects.create(payment=payment, event=event, payload=payload or {}, status=payment.status)


def _lock_payment(**lookup) -> Payment:
    queryset = Payment.objects.select_related("booking").filter(**lookup)
    try:
        return lock_queryset_if_possible(queryset).get()
    except (Payment.DoesNotExist, DjangoValidationError, ValueError):
        raise PaymentNotFound(details={key: str(value) for key, value in lookup.items()})


def create_payment_intent(
    booking_id, actor: Actor, amount: Decimal, method: str = Payment.Method.STRIPE
) -> tuple[Payment, PaymentIntent]:
    """Open a pending payment for one of the actor's bookings."""
    try:
        booking = Booking.objects.get(pk=booking_id)
    except (Booking.DoesNotExist, DjangoValidationError, ValueError):
        raise BookingNotFound(details={"booking_id": str(booking_id)})

    if not actor.owns(booking.customer_id):
        logger.warning(f"User {actor.user_id} tried to pay for booking {booking.booking_number}")
        raise PaymentAccessDenied("You can only pay for your own bookings")
    if amount is None or amount <= 0:
        raise DomainValidationError("Payment amount must be greater than zero", details={"amount": str(amount)})
    if booking.status == Booking.Status.CANCELLED:
        raise InvalidStatusTransition(
            "Cannot pay for a cancelled booking",
            details={"current_status": booking.status},
        )

    with DjangoUnitOfWork():
        payment = Payment.objects.create(
            booking=booking,
            amount=amount,
            currency=booking.currency,
            method=method,
            payment_intent_id=f"pi_{uuid4().hex}",
        )
        _record(payment, "intent_created", {"amount": str(amount), "method": method})

    intent = PaymentIntent(
        id=payment.payment_intent_id,
        amount=Money(payment.amount, payment.currency).to_minor_units(),
        currency=payment.currency.lower(),
    )
    logger.info(f"Payment intent {intent.id} created for booking {booking.booking_number}, {amount} {payment.currency}")
    return payment, intent


def confirm_payment(payment_intent_id: str, transaction_id: str | None = None) -> Payment:
    """Mark a payment as succeeded and the booking as paid.

    Confirming an already succeeded payment returns it unchanged.
    """
    with DjangoUnitOfWork() as uow:
        payment = _lock_payment(payment_intent_id=payment_intent_id)
        if payment.status == Payment.Status.SUCCEEDED:
            logger.info(f"Payment {payment_intent_id} already confirmed")
            return payment

        payment.mark_succeeded(transaction_id or f"txn_{uuid4().hex}")
        payment.save(update_fields=["status", "transaction_id", "paid_at", "updated_at"])
        Booking.objects.filter(pk=payment.booking_id).update(
            payment_status=Booking.PaymentStatus.PAID,
            payment_intent_id=payment.payment_intent_id,
            updated_at=timezone.now(),
        )
        _record(payment, "confirmed", {"transaction_id": payment.transaction_id})
        uow.collect_events(payment)

    logger.info(f"Payment {payment_intent_id} succeeded for booking {payment.booking.booking_number}")
    return payment


def get_payment_status(payment_id, actor: Actor) -> Payment:
    try:
        payment = Payment.objects.select_related("booking").get(pk=payment_id)
    except (Payment.DoesNotExist, DjangoValidationError, ValueError):
        raise PaymentNotFound(details={"payment_id": str(payment_id)})
    _ensure_owner_or_admin(payment, actor)
    return payment


def refund_payment(payment_id, amount: Decimal | None = None, reason: str = "") -> Payment:
    """Refund a succeeded payment (administrators only, checked by the view).

    A full refund moves the booking from ``paid`` to ``refunded``; booking
    status and inventory are left alone.
    """
    with DjangoUnitOfWork() as uow:
        payment = _lock_payment(pk=payment_id)
        if payment.status != Payment.Status.SUCCEEDED:
            raise InvalidPaymentStatus(
                "Only succeeded payments can be refunded",
                details={"payment_status": payment.status},
            )
        refund_amount = payment.amount if amount is None else amount
        if refund_amount <= 0 or refund_amount > payment.amount:
            raise DomainValidationError(
                "Refund amount must be positive and cannot exceed the payment amount",
                details={"amount": str(refund_amount), "payment_amount": str(payment.amount)},
            )

        payment.mark_refunded(refund_amount, reason)
        payment.save(update_fields=["status", "refunded_at", "metadata", "updated_at"])
        if refund_amount == payment.amount:
            Booking.objects.filter(
                pk=payment.booking_id, payment_status=Booking.PaymentStatus.PAID
            ).update(payment_status=Booking.PaymentStatus.REFUNDED, updated_at=timezone.now())
        _record(payment, "refunded", {"amount": str(refund_amount), "reason": reason})
        uow.collect_events(payment)

    logger.info(f"Payment {payment.payment_intent_id} refunded: {refund_amount} {payment.currency}")
    return payment
