"""Serializers for the booking domain."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.catalog.models import Product, RentalUnit
from apps.users.serializers import AddressSerializer
from shared.api.serializers import StrictFieldsMixin

from .application.command_handlers import BookingPatch, CreateBookingCommand
from .domain.pricing import ClaimedPricing, LineRequest
from .models import Booking, BookingItem


# --- Output ------------------------------------------------------------------

class BookingProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "images", "category"]


class BookingItemSerializer(serializers.ModelSerializer):
    product = BookingProductSerializer(read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = BookingItem
        fields = ["product", "quantity", "unit_price", "rental_unit", "duration", "line_total"]


class BookingDatesSerializer(serializers.ModelSerializer):
    class Meta:
        model = Booking
        fields = ["start_date", "end_date", "actual_return_date"]


class BookingPricingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Booking
        fields = ["subtotal", "discount", "late_fees", "total", "currency"]


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned by every booking endpoint."""

    customer = serializers.SerializerMethodField()
    items = BookingItemSerializer(many=True, read_only=True)
    dates = BookingDatesSerializer(source="*", read_only=True)
    pricing = BookingPricingSerializer(source="*", read_only=True)
    duration_in_days = serializers.IntegerField(read_only=True)
    is_late_return = serializers.BooleanField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_number",
            "customer",
            "items",
            "dates",
            "pricing",
            "status",
            "payment_status",
            "payment_intent_id",
            "delivery_address",
            "notes",
            "duration_in_days",
            "is_late_return",
            "confirmed_at",
            "activated_at",
            "completed_at",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer(self, obj: Booking) -> dict[str, Any]:
        return {"id": obj.customer_id, "email": obj.customer.email, "full_name": obj.customer.full_name}


# --- Input -------------------------------------------------------------------

class LineItemInputSerializer(StrictFieldsMixin, serializers.Serializer):
    product = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    rental_unit = serializers.ChoiceField(choices=RentalUnit.choices)
    duration = serializers.IntegerField(min_value=1, required=False)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class DateRangeInputSerializer(StrictFieldsMixin, serializers.Serializer):
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()


class PricingInputSerializer(StrictFieldsMixin, serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    late_fees = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class BookingCreateSerializer(StrictFieldsMixin, serializers.Serializer):
    items = LineItemInputSerializer(many=True, allow_empty=False)
    dates = DateRangeInputSerializer()
    pricing = PricingInputSerializer(required=False)
    delivery_address = AddressSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def to_command(self, customer_id: int) -> CreateBookingCommand:
        data = self.validated_data
        pricing = data.get("pricing")
        return CreateBookingCommand(
            customer_id=customer_id,
            items=[
                LineRequest(
                    product_id=item["product"],
                    quantity=item["quantity"],
                    rental_unit=item["rental_unit"],
                    duration=item.get("duration"),
                    unit_price=item.get("unit_price"),
                )
                for item in data["items"]
            ],
            start_date=data["dates"]["start_date"],
            end_date=data["dates"]["end_date"],
            pricing=ClaimedPricing(
                subtotal=pricing.get("subtotal"),
                discount=pricing.get("discount"),
                late_fees=pricing.get("late_fees"),
                total=pricing.get("total"),
            ) if pricing else None,
            delivery_address=dict(data.get("delivery_address") or {}),
            notes=data["notes"],
        )


class ReturnDateInputSerializer(StrictFieldsMixin, serializers.Serializer):
    actual_return_date = serializers.DateTimeField()


class BookingUpdateSerializer(StrictFieldsMixin, serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    dates = ReturnDateInputSerializer(required=False)
    cancellation_reason = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Nothing to update.")
        return attrs

    def to_patch(self) -> BookingPatch:
        data = self.validated_data
        return BookingPatch(
            status=data.get("status"),
            notes=data.get("notes"),
            actual_return_date=(data.get("dates") or {}).get("actual_return_date"),
            cancellation_reason=data.get("cancellation_reason", ""),
        )


class BookingCancelSerializer(StrictFieldsMixin, serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")
