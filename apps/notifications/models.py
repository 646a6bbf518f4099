"""Notification model.

A message shown to a user in the application. Notifications are created by
event handlers (booking confirmed or cancelled, payment received), by the
periodic booking tasks (return reminders, late returns) or manually by an
administrator. Each notification can be marked as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class NotificationQuerySet(models.QuerySet):
    def unread(self):  # type: ignore
        return self.filter(is_read=False)


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        BOOKING_REMINDER = "booking_reminder", _("Booking reminder")
        RETURN_REMINDER = "return_reminder", _("Return reminder")
        LATE_FEE = "late_fee", _("Late fee")
        BOOKING_CONFIRMED = "booking_confirmed", _("Booking confirmed")
        PAYMENT_RECEIVED = "payment_received", _("Payment received")
        BOOKING_CANCELLED = "booking_cancelled", _("Booking cancelled")

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    type = models.CharField(max_length=32, choices=Type.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()
    booking = models.ForeignKey(
        'bookings.Booking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications',
    )
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [models.Index(fields=['user', 'is_read'])]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
