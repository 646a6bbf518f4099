"""Payment ledger models for the rental platform."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.models import default_currency
from shared.domain.base import AggregateRoot

from .events import PaymentRefunded, PaymentSucceeded
from .exceptions import InvalidPaymentStatus


class Payment(AggregateRoot, models.Model):
    """Payment made against a booking.

    A booking may carry several payments; each one is identified by the
    intent reference handed to the client.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        SUCCEEDED = "succeeded", _("Succeeded")
        FAILED = "failed", _("Failed")
        CANCELLED = "cancelled", _("Cancelled")
        REFUNDED = "refunded", _("Refunded")

    class Method(models.TextChoices):
        STRIPE = "stripe", _("Stripe")
        PAYPAL = "paypal", _("PayPal")
        RAZORPAY = "razorpay", _("Razorpay")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default=default_currency)
    method = models.CharField(max_length=20, choices=Method.choices, default=Method.STRIPE)
    payment_intent_id = models.CharField(max_length=64, unique=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    transaction_id = models.CharField(max_length=100, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name="payment_amount_positive"),
        ]

    def __str__(self) -> str:
        return f"Payment {self.payment_intent_id} ({self.status})"

    def mark_succeeded(self, transaction_id: str) -> None:
        if self.status in (self.Status.REFUNDED, self.Status.FAILED, self.Status.CANCELLED):
            raise InvalidPaymentStatus(
                f"Payment cannot be confirmed, status is {self.status}",
                details={"payment_status": self.status},
            )
        self.status = self.Status.SUCCEEDED
        self.transaction_id = transaction_id
        self.paid_at = timezone.now()
        self.add_event(
            PaymentSucceeded(
                aggregate_id=self.pk,
                payment_id=self.pk,
                booking_id=self.booking_id,
                booking_number=self.booking.booking_number,
                customer_id=self.booking.customer_id,
                amount=self.amount,
                currency=self.currency,
            )
        )

    def mark_refunded(self, amount: Decimal, reason: str = "") -> None:
        if self.status != self.Status.SUCCEEDED:
            raise InvalidPaymentStatus(
                "Only succeeded payments can be refunded",
                details={"payment_status": self.status},
            )
        self.status = self.Status.REFUNDED
        self.refunded_at = timezone.now()
        self.metadata = {
            **self.metadata,
            "refund_amount": str(amount),
            "refund_reason": reason,
            "refund_date": self.refunded_at.isoformat(),
        }
        self.add_event(
            PaymentRefunded(
                aggregate_id=self.pk,
                payment_id=self.pk,
                booking_id=self.booking_id,
                customer_id=self.booking.customer_id,
                amount=amount,
                currency=self.currency,
                full_refund=amount == self.amount,
            )
        )


class PaymentTransaction(models.Model):
    """History of what happened to a payment (intent, confirmation, refund)."""

    payment = models.ForeignKey(
        Payment,
        on_delete=models.CASCADE,
        related_name="transactions",
    )
    event = models.CharField(max_length=50)
    payload = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.event} for payment {self.payment_id}"
