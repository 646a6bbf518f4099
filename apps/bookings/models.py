"""Booking domain models for the rental platform."""

from __future__ import annotations

import math
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.catalog.models import RentalUnit
from shared.domain.base import AggregateRoot

from .domain import status as transitions
from .domain.events import (
    BookingActivated,
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
)


def default_currency() -> str:
    return settings.RENTAL_CURRENCY


class Booking(AggregateRoot, models.Model):
    """Time-bounded rental of one or more products by a customer.

    ``status`` follows the state machine in ``domain/status.py``;
    ``payment_status`` is an independent axis moved by the payment ledger.
    Bookings are never deleted.
    """

    class Status(models.TextChoices):
        PENDING = transitions.PENDING, _("Pending")
        CONFIRMED = transitions.CONFIRMED, _("Confirmed")
        ACTIVE = transitions.ACTIVE, _("Active")
        COMPLETED = transitions.COMPLETED, _("Completed")
        CANCELLED = transitions.CANCELLED, _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PARTIAL = "partial", _("Partially paid")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking_number = models.CharField(max_length=32, unique=True, editable=False)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    actual_return_date = models.DateTimeField(null=True, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    late_fees = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default=default_currency)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_intent_id = models.CharField(max_length=100, blank=True)
    delivery_address = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True)

    confirmed_at = models.DateTimeField(null=True, blank=True)
    activated_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(discount__gte=0) & models.Q(late_fees__gte=0),
                name="booking_non_negative_adjustments",
            ),
        ]
        indexes = [
            models.Index(fields=["customer", "-created_at"]),
            models.Index(fields=["status", "-created_at"]),
            models.Index(fields=["start_date", "end_date"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.booking_number}"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.start_date >= self.end_date:
            raise ValidationError(_("End date must be after start date."))

    # --- Derived values ------------------------------------------------------
    @property
    def duration_in_days(self) -> int:
        if not (self.start_date and self.end_date):
            return 0
        return math.ceil(abs(self.end_date - self.start_date) / timedelta(days=1))

    @property
    def is_late_return(self) -> bool:
        if self.actual_return_date and self.end_date:
            return self.actual_return_date > self.end_date
        if self.end_date:
            return timezone.now() > self.end_date and self.status == self.Status.ACTIVE
        return False

    @property
    def holds_inventory(self) -> bool:
        return str(self.status) in transitions.HOLDS_INVENTORY

    def stock_lines(self) -> list[tuple[uuid.UUID, int]]:
        return [(item.product_id, item.quantity) for item in self.items.all()]

    # --- Transitions ---------------------------------------------------------
    def confirm(self) -> None:
        transitions.ensure_transition(self.status, transitions.CONFIRMED)
        self.status = self.Status.CONFIRMED
        self.confirmed_at = timezone.now()
        self.add_event(
            BookingConfirmed(
                aggregate_id=self.pk,
                booking_id=self.pk,
                booking_number=self.booking_number,
                customer_id=self.customer_id,
            )
        )

    def activate(self) -> None:
        transitions.ensure_transition(self.status, transitions.ACTIVE)
        self.status = self.Status.ACTIVE
        self.activated_at = timezone.now()
        self.add_event(
            BookingActivated(
                aggregate_id=self.pk,
                booking_id=self.pk,
                booking_number=self.booking_number,
                customer_id=self.customer_id,
            )
        )

    def complete(self, returned_at: datetime | None = None) -> None:
        """Items are back: the caller releases the reserved inventory."""
        transitions.ensure_transition(self.status, transitions.COMPLETED)
        self.status = self.Status.COMPLETED
        self.completed_at = timezone.now()
        self.actual_return_date = returned_at or self.actual_return_date or self.completed_at
        self.add_event(
            BookingCompleted(
                aggregate_id=self.pk,
                booking_id=self.pk,
                booking_number=self.booking_number,
                customer_id=self.customer_id,
                late_return=self.is_late_return,
            )
        )

    def cancel(self, reason: str = "", cancelled_by: int | None = None) -> None:
        """Cancel from any non-terminal status: the caller releases the inventory."""
        transitions.ensure_transition(self.status, transitions.CANCELLED)
        self.status = self.Status.CANCELLED
        self.cancelled_at = timezone.now()
        self.cancellation_reason = reason[:255]
        self.add_event(
            BookingCancelled(
                aggregate_id=self.pk,
                booking_id=self.pk,
                booking_number=self.booking_number,
                customer_id=self.customer_id,
                reason=self.cancellation_reason,
                cancelled_by=cancelled_by,
            )
        )


class BookingItem(models.Model):
    """One product line of a booking, priced when the booking was made."""

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.PROTECT,
        related_name="booking_items",
    )
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    rental_unit = models.CharField(max_length=10, choices=RentalUnit.choices)
    duration = models.PositiveIntegerField()
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        verbose_name = _("Booking item")
        verbose_name_plural = _("Booking items")
        ordering = ["position", "id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name="booking_item_quantity_positive"),
            models.CheckConstraint(condition=models.Q(duration__gte=1), name="booking_item_duration_positive"),
            models.CheckConstraint(condition=models.Q(unit_price__gte=0), name="booking_item_price_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product_id} ({self.duration} {self.rental_unit})"

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity * self.duration
