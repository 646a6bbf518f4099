"""
Event Handlers

Subscribers on the message bus turning booking and payment events into
in-app notifications. They run after the originating transaction commits;
a failure here is logged by the bus and never undoes the booking change.
"""

import logging

from apps.bookings.domain.events import BookingCancelled, BookingConfirmed
from apps.payments.events import PaymentSucceeded
from shared.application.message_bus import message_bus

from .models import Notification
from .services import create_notification

logger = logging.getLogger(__name__)


def on_booking_confirmed(event: BookingConfirmed) -> None:
    create_notification(
        event.customer_id,
        Notification.Type.BOOKING_CONFIRMED,
        f"Booking {event.booking_number} confirmed",
        f"Your booking {event.booking_number} has been confirmed.",
        booking_id=event.booking_id,
        send_email=True,
    )


def on_booking_cancelled(event: BookingCancelled) -> None:
    message = f"Your booking {event.booking_number} has been cancelled."
    if event.reason:
        message = f"{message} Reason: {event.reason}"
    create_notification(
        event.customer_id,
        Notification.Type.BOOKING_CANCELLED,
        f"Booking {event.booking_number} cancelled",
        message,
        booking_id=event.booking_id,
        data={"cancelled_by": event.cancelled_by},
    )


def on_payment_succeeded(event: PaymentSucceeded) -> None:
    create_notification(
        event.customer_id,
        Notification.Type.PAYMENT_RECEIVED,
        f"Payment received for booking {event.booking_number}",
        f"We received your payment of {event.amount} {event.currency}.",
        booking_id=event.booking_id,
        data={"payment_id": str(event.payment_id)},
        send_email=True,
    )


def register_handlers() -> None:
    """Subscribe the notification handlers; safe to call more than once."""
    message_bus.register_event_handler(BookingConfirmed, on_booking_confirmed)
    message_bus.register_event_handler(BookingCancelled, on_booking_cancelled)
    message_bus.register_event_handler(PaymentSucceeded, on_payment_succeeded)
    logger.debug("Notification handlers registered")
