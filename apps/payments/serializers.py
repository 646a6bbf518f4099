"""Serializers for the payment ledger."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment, PaymentTransaction


class PaymentTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentTransaction
        fields = ["id", "event", "payload", "status", "created_at"]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    transactions = PaymentTransactionSerializer(many=True, read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "amount",
            "currency",
            "method",
            "payment_intent_id",
            "status",
            "transaction_id",
            "metadata",
            "paid_at",
            "refunded_at",
            "created_at",
            "updated_at",
            "transactions",
        ]
        read_only_fields = fields


class PaymentIntentInputSerializer(serializers.Serializer):
    booking_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices, default=Payment.Method.STRIPE)


class PaymentConfirmSerializer(serializers.Serializer):
    payment_intent_id = serializers.CharField(max_length=64)
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class RefundInputSerializer(serializers.Serializer):
    payment_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    reason = serializers.CharField(required=False, allow_blank=True, default="")
