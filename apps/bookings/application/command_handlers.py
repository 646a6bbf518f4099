"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Validate, price and create a booking, reserving inventory
- ConfirmBookingCommand: pending -> confirmed
- CancelBookingCommand: -> cancelled, releasing inventory
- UpdateBookingCommand: Typed patch of notes, return date and status
- ActivateBookingCommand: confirmed -> active (items handed over)
- CompleteBookingCommand: active -> completed, releasing inventory

Status changes requested through UpdateBooking are routed through the same
transition helpers as the dedicated commands, so the inventory effects of a
cancellation or completion never depend on which endpoint asked for it.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID, uuid4
import logging

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.bookings.domain import status as transitions
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.pricing import ClaimedPricing, LineRequest, Quote, build_quote, price_line
from apps.bookings.exceptions import (
    BookingAccessDenied,
    BookingNotFound,
    InvalidDateRange,
    InvalidStatusTransition,
    StartDateInPast,
)
from apps.bookings.models import Booking, BookingItem
from apps.catalog.exceptions import (
    InsufficientInventory,
    ProductInactive,
    ProductNotFound,
    ProductNotRentable,
)
from apps.catalog.inventory import release_items, reserve_items
from apps.catalog.models import Product
from shared.application.uow import DjangoUnitOfWork, lock_queryset_if_possible
from shared.domain.exceptions import DomainValidationError
from shared.domain.value_objects import Actor, DateRange

logger = logging.getLogger(__name__)

BOOKING_NUMBER_ATTEMPTS = 5


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``pricing`` is what the client believes the booking costs; it is checked
    against the server-side quote, never stored as is.
    """
    customer_id: int
    items: Sequence[LineRequest]
    start_date: datetime
    end_date: datetime
    pricing: Optional[ClaimedPricing] = None
    delivery_address: dict = field(default_factory=dict)
    notes: str = ''


@dataclass
class ConfirmBookingCommand:
    """Command to confirm a pending booking"""
    booking_id: UUID
    actor: Actor


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking"""
    booking_id: UUID
    actor: Actor
    reason: str = ''


@dataclass
class BookingPatch:
    """
    Fields a booking may be patched with; ``None`` leaves a field untouched

    Any other field in the request is rejected before a patch is built.
    """
    status: Optional[str] = None
    notes: Optional[str] = None
    actual_return_date: Optional[datetime] = None
    cancellation_reason: str = ''


@dataclass
class UpdateBookingCommand:
    """Command to patch a booking"""
    booking_id: UUID
    actor: Actor
    patch: BookingPatch


@dataclass
class ActivateBookingCommand:
    """Command to hand over a confirmed booking"""
    booking_id: UUID


@dataclass
class CompleteBookingCommand:
    """Command to close an active booking once the items are back"""
    booking_id: UUID
    returned_at: Optional[datetime] = None


# ===== Shared helpers =====

def generate_booking_number() -> str:
    return f"BK{timezone.now():%Y%m%d%H%M%S}{uuid4().hex[:6].upper()}"


def lock_booking(booking_id) -> Booking:
    """Load a booking, row-locked for the rest of the transaction"""
    try:
        return lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).get()
    except (Booking.DoesNotExist, DjangoValidationError, ValueError):
        raise BookingNotFound(details={'booking_id': str(booking_id)})


def ensure_can_access(booking: Booking, actor: Actor) -> None:
    if not (actor.is_admin or actor.owns(booking.customer_id)):
        logger.warning(f"User {actor.user_id} denied access to booking {booking.booking_number}")
        raise BookingAccessDenied()


def _ensure_admin(actor: Actor, action: str) -> None:
    if not actor.is_admin:
        raise BookingAccessDenied(f"Only administrators can {action} a booking")


def cancel_booking(booking: Booking, reason: str = '', cancelled_by: Optional[int] = None) -> None:
    booking.cancel(reason=reason, cancelled_by=cancelled_by)
    release_items(booking.stock_lines())


def complete_booking(booking: Booking, returned_at: Optional[datetime] = None) -> None:
    booking.complete(returned_at=returned_at)
    release_items(booking.stock_lines())


def _save_with_unique_number(booking: Booking) -> None:
    for attempt in range(1, BOOKING_NUMBER_ATTEMPTS + 1):
        booking.booking_number = generate_booking_number()
        try:
            with transaction.atomic():
                booking.save(force_insert=True)
            return
        except IntegrityError:
            taken = Booking.objects.filter(booking_number=booking.booking_number).exists()
            if not taken or attempt == BOOKING_NUMBER_ATTEMPTS:
                raise
            logger.warning(f"Booking number {booking.booking_number} already taken, regenerating")


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Every check runs before anything is written. The inventory is then
    reserved per product, in product id order, with conditional updates; if
    one product cannot be reserved the products already reserved are
    released and the booking rolls back, so a failed call leaves neither a
    booking nor an inventory change.
    """

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            f"Creating booking for customer {command.customer_id}, "
            f"{len(command.items)} item(s), dates {command.start_date} - {command.end_date}"
        )

        if command.start_date >= command.end_date:
            raise InvalidDateRange(
                details={'start_date': command.start_date.isoformat(), 'end_date': command.end_date.isoformat()}
            )
        if command.start_date < timezone.now():
            raise StartDateInPast(details={'start_date': command.start_date.isoformat()})
        if not command.items:
            raise DomainValidationError("At least one item is required")

        period = DateRange(command.start_date, command.end_date)
        quote = self._quote(command, period)

        with DjangoUnitOfWork() as uow:
            booking = Booking(
                customer_id=command.customer_id,
                start_date=command.start_date,
                end_date=command.end_date,
                subtotal=quote.subtotal.amount,
                discount=quote.discount.amount,
                late_fees=quote.late_fees.amount,
                total=quote.total.amount,
                currency=quote.total.currency,
                delivery_address=command.delivery_address or {},
                notes=command.notes or '',
            )
            _save_with_unique_number(booking)
            BookingItem.objects.bulk_create(
                BookingItem(
                    booking=booking,
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    rental_unit=line.rental_unit,
                    duration=line.duration,
                    position=position,
                )
                for position, line in enumerate(quote.lines)
            )
            reserve_items([(line.product_id, line.quantity) for line in quote.lines])

            booking.add_event(
                BookingCreated(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    booking_number=booking.booking_number,
                    customer_id=booking.customer_id,
                    total=booking.total,
                    currency=booking.currency,
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} created, total {booking.total} {booking.currency}")
        return booking

    def _quote(self, command: CreateBookingCommand, period: DateRange) -> Quote:
        product_ids = {line.product_id for line in command.items}
        try:
            products = {
                product.pk: product
                for product in Product.objects.prefetch_related('rental_units').filter(pk__in=product_ids)
            }
        except DjangoValidationError:
            raise ProductNotFound()

        priced = []
        for request in command.items:
            product = products.get(request.product_id)
            if product is None:
                raise ProductNotFound(
                    f"Product not found: {request.product_id}",
                    details={'product_id': str(request.product_id)},
                )
            if not product.is_active:
                raise ProductInactive(f"Product is no longer active: {product.name}", details={'product_id': str(product.pk)})
            if not product.is_rentable:
                raise ProductNotRentable(f"Product is not available for rent: {product.name}", details={'product_id': str(product.pk)})
            priced.append(price_line(product, request, period))

        quote = build_quote(priced, settings.RENTAL_CURRENCY, command.pricing)

        # Early answer only; the conditional reservation is what guarantees it
        requested = Counter()
        for line in priced:
            requested[line.product_id] += line.quantity
        for product_id, quantity in requested.items():
            product = products[product_id]
            if product.available_quantity < quantity:
                raise InsufficientInventory(
                    f"Insufficient inventory for product: {product.name}",
                    details={
                        'product_id': str(product_id),
                        'requested': quantity,
                        'available': product.available_quantity,
                    },
                )
        return quote


class ConfirmBookingHandler:
    """Handler for ConfirmBooking command"""

    def handle(self, command: ConfirmBookingCommand) -> Booking:
        logger.info(f"Confirming booking {command.booking_id} by user {command.actor.user_id}")

        with DjangoUnitOfWork() as uow:
            booking = lock_booking(command.booking_id)
            ensure_can_access(booking, command.actor)
            booking.confirm()
            booking.save(update_fields=['status', 'confirmed_at', 'updated_at'])
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} confirmed successfully")
        return booking


class CancelBookingHandler:
    """
    Handler for CancelBooking command

    The booking row is locked before the status check, so two concurrent
    cancellations cannot both release the same inventory.
    """

    def handle(self, command: CancelBookingCommand) -> Booking:
        logger.info(f"Cancelling booking {command.booking_id}, reason: {command.reason or '-'}")

        with DjangoUnitOfWork() as uow:
            booking = lock_booking(command.booking_id)
            ensure_can_access(booking, command.actor)
            cancel_booking(booking, reason=command.reason, cancelled_by=command.actor.user_id)
            booking.save(update_fields=['status', 'cancelled_at', 'cancellation_reason', 'updated_at'])
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} cancelled, inventory released")
        return booking


class UpdateBookingHandler:
    """
    Handler for UpdateBooking command

    Status values go through the transition helpers:
    - confirmed: as ConfirmBooking
    - cancelled: as CancelBooking, inventory released
    - active, completed: administrators only; completion stamps the return
      date and releases inventory
    - anything else is an invalid transition
    """

    def handle(self, command: UpdateBookingCommand) -> Booking:
        patch = command.patch
        logger.info(f"Updating booking {command.booking_id} by user {command.actor.user_id}")

        with DjangoUnitOfWork() as uow:
            booking = lock_booking(command.booking_id)
            ensure_can_access(booking, command.actor)

            if patch.actual_return_date is not None:
                if patch.actual_return_date <= booking.start_date:
                    raise InvalidDateRange(
                        "Return date must be after the start date",
                        details={
                            'start_date': booking.start_date.isoformat(),
                            'actual_return_date': patch.actual_return_date.isoformat(),
                        },
                    )
                booking.actual_return_date = patch.actual_return_date

            if patch.notes is not None:
                booking.notes = patch.notes

            if patch.status is not None:
                self._apply_status(booking, patch, command.actor)

            booking.save()
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} updated")
        return booking

    def _apply_status(self, booking: Booking, patch: BookingPatch, actor: Actor) -> None:
        target = patch.status
        if target == transitions.CONFIRMED:
            booking.confirm()
        elif target == transitions.CANCELLED:
            cancel_booking(booking, reason=patch.cancellation_reason, cancelled_by=actor.user_id)
        elif target == transitions.ACTIVE:
            _ensure_admin(actor, 'activate')
            booking.activate()
        elif target == transitions.COMPLETED:
            _ensure_admin(actor, 'complete')
            complete_booking(booking, returned_at=patch.actual_return_date)
        else:
            raise InvalidStatusTransition(
                details={'current_status': booking.status, 'requested_status': target}
            )


class ActivateBookingHandler:
    """Handler for ActivateBooking command (system or administrator)"""

    def handle(self, command: ActivateBookingCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = lock_booking(command.booking_id)
            booking.activate()
            booking.save(update_fields=['status', 'activated_at', 'updated_at'])
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} activated")
        return booking


class CompleteBookingHandler:
    """Handler for CompleteBooking command (system or administrator)"""

    def handle(self, command: CompleteBookingCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = lock_booking(command.booking_id)
            complete_booking(booking, returned_at=command.returned_at)
            booking.save(update_fields=['status', 'completed_at', 'actual_return_date', 'updated_at'])
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_number} completed, inventory released")
        return booking
