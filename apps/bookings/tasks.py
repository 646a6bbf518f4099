"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from apps.notifications.models import Notification
from apps.notifications.services import create_notification

from .application.command_handlers import ActivateBookingCommand, ActivateBookingHandler
from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.activate_started_bookings")
def activate_started_bookings() -> dict[str, int]:
    """
    Hand over confirmed bookings whose start date has passed.

    Runs hourly. Each booking goes through the same transition as a manual
    activation, so a booking cancelled in the meantime is skipped.

    Returns:
        dict: {"activated": number of bookings moved to active}
    """
    now = timezone.now()
    activated_count = 0

    booking_ids = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        start_date__lte=now,
    ).values_list("id", flat=True)

    for booking_id in list(booking_ids):
        try:
            ActivateBookingHandler().handle(ActivateBookingCommand(booking_id=booking_id))
            activated_count += 1
        except Exception as e:
            logger.error(f"Error activating booking {booking_id}: {e}", exc_info=True)

    if activated_count > 0:
        logger.info(f"Activated {activated_count} started bookings")

    return {"activated": activated_count}


@shared_task(name="bookings.send_return_reminders")
def send_return_reminders() -> dict[str, int]:
    """
    Remind customers of upcoming returns and flag late ones.

    Active bookings ending within RETURN_REMINDER_HOURS get one
    ``return_reminder``; active bookings past their end date get one
    ``late_fee`` notice. Runs every 6 hours; a booking is never notified
    twice for the same reason.

    Returns:
        dict: {"reminders": ..., "late": ...}
    """
    now = timezone.now()
    horizon = now + timedelta(hours=settings.RETURN_REMINDER_HOURS)
    active = Booking.objects.filter(status=Booking.Status.ACTIVE)

    reminders = _notify_once(
        active.filter(end_date__gt=now, end_date__lte=horizon),
        Notification.Type.RETURN_REMINDER,
        "Return reminder",
        "Your rental {number} is due back on {end}.",
    )
    late = _notify_once(
        active.filter(end_date__lte=now),
        Notification.Type.LATE_FEE,
        "Rental overdue",
        "Your rental {number} was due back on {end}. Late fees may apply.",
    )

    if reminders or late:
        logger.info(f"Sent {reminders} return reminders and {late} late return notices")

    return {"reminders": reminders, "late": late}


def _notify_once(bookings, notification_type: str, title: str, template: str) -> int:
    already_notified = Notification.objects.filter(
        type=notification_type, booking__isnull=False
    ).values("booking_id")
    sent_count = 0
    for booking in bookings.exclude(id__in=already_notified):
        try:
            create_notification(
                booking.customer_id,
                notification_type,
                f"{title}: {booking.booking_number}",
                template.format(number=booking.booking_number, end=f"{booking.end_date:%Y-%m-%d %H:%M}"),
                booking_id=booking.pk,
                send_email=True,
            )
            sent_count += 1
        except Exception as e:
            logger.error(f"Error notifying booking {booking.pk}: {e}", exc_info=True)
    return sent_count
