"""
Booking Queries

Read side of the booking engine. Ownership is enforced here as well: a
customer asking for someone else's booking is denied, not shown a 404.
"""

from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError

from apps.bookings.application.command_handlers import ensure_can_access
from apps.bookings.exceptions import BookingNotFound
from apps.bookings.models import Booking
from shared.domain.exceptions import DomainValidationError
from shared.domain.value_objects import Actor


def _with_relations(queryset):
    return queryset.select_related('customer').prefetch_related('items__product')


def get_booking_for_actor(booking_id, actor: Actor) -> Booking:
    try:
        booking = _with_relations(Booking.objects.all()).get(pk=booking_id)
    except (Booking.DoesNotExist, DjangoValidationError, ValueError):
        raise BookingNotFound(details={'booking_id': str(booking_id)})
    ensure_can_access(booking, actor)
    return booking


def list_bookings_for_actor(actor: Actor, status: Optional[str] = None):
    """Own bookings for customers, every booking for administrators; newest first"""
    queryset = Booking.objects.all()
    if not actor.is_admin:
        queryset = queryset.filter(customer_id=actor.user_id)
    if status:
        if status not in Booking.Status.values:
            raise DomainValidationError(
                f"Unknown booking status: {status}",
                details={'status': status, 'allowed': list(Booking.Status.values)},
            )
        queryset = queryset.filter(status=status)
    return _with_relations(queryset).order_by('-created_at')
