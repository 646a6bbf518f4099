"""Tests for the periodic booking tasks."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from apps.bookings.application.command_handlers import (
    ActivateBookingCommand,
    ActivateBookingHandler,
    ConfirmBookingCommand,
    ConfirmBookingHandler,
    CreateBookingCommand,
    CreateBookingHandler,
)
from apps.bookings.domain.pricing import LineRequest
from apps.bookings.models import Booking
from apps.bookings.tasks import activate_started_bookings, send_return_reminders
from apps.catalog.models import Product, RentalUnitTier
from apps.notifications.models import Notification
from apps.users.models import User
from shared.domain.value_objects import Actor


class BookingTaskTests(TestCase):
    def setUp(self) -> None:
        self.customer = User.objects.create_user(email="customer@example.com", password="secret123")
        self.actor = Actor.from_user(self.customer)
        self.product = Product.objects.create(name="Tent", category="camping", total_quantity=10, available_quantity=10)
        RentalUnitTier.objects.create(product=self.product, unit="hour", price=Decimal("2.00"))

    def _booking(self, *, confirm: bool = False, activate: bool = False) -> Booking:
        start = timezone.now() + timedelta(minutes=30)
        booking = CreateBookingHandler().handle(
            CreateBookingCommand(
                customer_id=self.customer.pk,
                items=[LineRequest(product_id=self.product.pk, quantity=1, rental_unit="hour")],
                start_date=start,
                end_date=start + timedelta(days=3),
            )
        )
        if confirm or activate:
            ConfirmBookingHandler().handle(ConfirmBookingCommand(booking_id=booking.pk, actor=self.actor))
        if activate:
            ActivateBookingHandler().handle(ActivateBookingCommand(booking_id=booking.pk))
        return booking

    def _move(self, booking: Booking, *, start_offset: timedelta, end_offset: timedelta) -> None:
        now = timezone.now()
        Booking.objects.filter(pk=booking.pk).update(start_date=now + start_offset, end_date=now + end_offset)

    def test_started_confirmed_bookings_are_activated(self) -> None:
        started = self._booking(confirm=True)
        future = self._booking(confirm=True)
        pending = self._booking()
        self._move(started, start_offset=-timedelta(hours=1), end_offset=timedelta(days=1))
        self._move(pending, start_offset=-timedelta(hours=1), end_offset=timedelta(days=1))

        result = activate_started_bookings()

        self.assertEqual(result, {"activated": 1})
        started.refresh_from_db()
        future.refresh_from_db()
        pending.refresh_from_db()
        self.assertEqual(started.status, Booking.Status.ACTIVE)
        self.assertIsNotNone(started.activated_at)
        self.assertEqual(future.status, Booking.Status.CONFIRMED)
        self.assertEqual(pending.status, Booking.Status.PENDING)

    @override_settings(RETURN_REMINDER_HOURS=24)
    def test_return_reminders_and_late_notices_are_sent_once(self) -> None:
        due_soon = self._booking(activate=True)
        overdue = self._booking(activate=True)
        later = self._booking(activate=True)
        self._move(due_soon, start_offset=-timedelta(days=2), end_offset=timedelta(hours=5))
        self._move(overdue, start_offset=-timedelta(days=2), end_offset=-timedelta(hours=5))
        self._move(later, start_offset=-timedelta(days=2), end_offset=timedelta(days=3))

        first = send_return_reminders()
        second = send_return_reminders()

        self.assertEqual(first, {"reminders": 1, "late": 1})
        self.assertEqual(second, {"reminders": 0, "late": 0})
        reminder = Notification.objects.get(type=Notification.Type.RETURN_REMINDER)
        late = Notification.objects.get(type=Notification.Type.LATE_FEE)
        self.assertEqual(reminder.booking_id, due_soon.pk)
        self.assertEqual(late.booking_id, overdue.pk)
        self.assertEqual(late.user, self.customer)
        self.assertFalse(Notification.objects.filter(booking=later).exists())
