"""API views for the booking domain."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.api.responses import envelope
from shared.domain.value_objects import Actor

from .application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    ConfirmBookingCommand,
    ConfirmBookingHandler,
    CreateBookingHandler,
    UpdateBookingCommand,
    UpdateBookingHandler,
)
from .application.queries import get_booking_for_actor, list_bookings_for_actor
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingUpdateSerializer,
)

logger = logging.getLogger(__name__)


class BookingViewSet(viewsets.GenericViewSet):
    """Bookings of the authenticated customer; administrators see every booking.

    Writes go through the command handlers, which own locking, inventory and
    events. Responses always re-read the booking with its items.
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = BookingSerializer
    envelope_key = "bookings"

    @property
    def page_size(self) -> int:
        return settings.BOOKINGS_PAGE_SIZE

    def _actor(self) -> Actor:
        return Actor.from_user(self.request.user)

    def _render(self, booking_id, actor: Actor, **extra):  # type: ignore
        booking = get_booking_for_actor(booking_id, actor)
        return envelope(booking=BookingSerializer(booking).data, **extra)

    def list(self, request):  # type: ignore
        queryset = list_bookings_for_actor(self._actor(), request.query_params.get("status"))
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(BookingSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        return self._render(pk, self._actor())

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = CreateBookingHandler().handle(serializer.to_command(request.user.pk))
        return self._render(booking.pk, self._actor(), status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):  # type: ignore
        serializer = BookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = self._actor()
        booking = UpdateBookingHandler().handle(
            UpdateBookingCommand(booking_id=pk, actor=actor, patch=serializer.to_patch())
        )
        return self._render(booking.pk, actor)

    partial_update = update

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        actor = self._actor()
        booking = ConfirmBookingHandler().handle(ConfirmBookingCommand(booking_id=pk, actor=actor))
        return self._render(booking.pk, actor)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        actor = self._actor()
        booking = CancelBookingHandler().handle(
            CancelBookingCommand(booking_id=pk, actor=actor, reason=serializer.validated_data["reason"])
        )
        logger.info(f"Booking {booking.booking_number} cancelled by {request.user.email}")
        return self._render(booking.pk, actor)
