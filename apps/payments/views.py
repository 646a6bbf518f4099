"""API views for the payment ledger.

Payments are created as intents by the booking owner and confirmed with the
intent reference, the way a gateway callback would. Refunds are reserved to
administrators.
"""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.users.permissions import IsAdminRole
from shared.api.responses import envelope
from shared.domain.value_objects import Actor

from . import services
from .serializers import (
    PaymentConfirmSerializer,
    PaymentIntentInputSerializer,
    PaymentSerializer,
    RefundInputSerializer,
)

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.GenericViewSet):
    """Payment intents, confirmation, status and refunds."""

    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):  # type: ignore
        if self.action == "refund":
            return [IsAdminRole()]
        return super().get_permissions()

    @action(detail=False, methods=["post"], url_path="create-intent")
    def create_intent(self, request):  # type: ignore
        serializer = PaymentIntentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        payment, intent = services.create_payment_intent(
            data["booking_id"],
            Actor.from_user(request.user),
            data["amount"],
            method=data["payment_method"],
        )
        return envelope(
            status=status.HTTP_201_CREATED,
            payment_intent=intent.as_dict(),
            payment=PaymentSerializer(payment).data,
        )

    @action(detail=False, methods=["post"])
    def confirm(self, request):  # type: ignore
        serializer = PaymentConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = services.confirm_payment(
            serializer.validated_data["payment_intent_id"],
            serializer.validated_data.get("transaction_id") or None,
        )
        return envelope(message="Payment confirmed successfully", payment=PaymentSerializer(payment).data)

    @action(detail=True, methods=["get"], url_path="status")
    def payment_status(self, request, pk=None):  # type: ignore
        payment = services.get_payment_status(pk, Actor.from_user(request.user))
        return envelope(payment=PaymentSerializer(payment).data)

    @action(detail=False, methods=["post"])
    def refund(self, request):  # type: ignore
        serializer = RefundInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        payment = services.refund_payment(data["payment_id"], data.get("amount"), data["reason"])
        logger.info(f"Admin {request.user.email} refunded payment {payment.pk}")
        return envelope(message="Refund processed successfully", payment=PaymentSerializer(payment).data)
