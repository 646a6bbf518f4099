"""Serializers for the catalog API."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rest_framework import serializers  # type: ignore

from shared.api.serializers import StrictFieldsMixin

from .models import Product, RentalUnit, RentalUnitTier
from .services import NewProduct, ProductPatch, TierSpec


class RentalUnitTierSerializer(serializers.ModelSerializer):
    class Meta:
        model = RentalUnitTier
        fields = ["unit", "price", "min_duration", "max_duration"]


class InventorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["total_quantity", "available_quantity", "reserved_quantity"]


class ProductSerializer(serializers.ModelSerializer):
    rental_units = RentalUnitTierSerializer(many=True, read_only=True)
    inventory = InventorySerializer(source="*", read_only=True)
    is_available = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "category",
            "images",
            "specifications",
            "is_rentable",
            "is_active",
            "is_available",
            "rental_units",
            "inventory",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TierInputSerializer(StrictFieldsMixin, serializers.Serializer):
    unit = serializers.ChoiceField(choices=RentalUnit.choices)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    min_duration = serializers.IntegerField(min_value=1, default=1)
    max_duration = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        max_duration = attrs.get("max_duration")
        if max_duration is not None and max_duration < attrs["min_duration"]:
            raise serializers.ValidationError({"max_duration": "Must not be lower than min_duration."})
        return attrs


def _tiers(items: list[dict[str, Any]]) -> list[TierSpec]:
    return [TierSpec(**item) for item in items]


class InventoryInputSerializer(StrictFieldsMixin, serializers.Serializer):
    total_quantity = serializers.IntegerField(min_value=1)


class InventoryPatchSerializer(StrictFieldsMixin, serializers.Serializer):
    total_quantity = serializers.IntegerField(min_value=0, required=False)
    available_quantity = serializers.IntegerField(min_value=0, required=False)

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, Mapping) and "reserved_quantity" in data:
            raise serializers.ValidationError(
                {"reserved_quantity": "Reserved quantity is managed by bookings and cannot be set."}
            )
        return super().to_internal_value(data)


class ProductCreateSerializer(StrictFieldsMixin, serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField()
    category = serializers.CharField(max_length=100)
    images = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    specifications = serializers.DictField(child=serializers.CharField(), required=False, default=dict)
    is_rentable = serializers.BooleanField(required=False, default=True)
    rental_units = TierInputSerializer(many=True, allow_empty=False)
    inventory = InventoryInputSerializer()

    def to_command(self) -> NewProduct:
        data = self.validated_data
        return NewProduct(
            name=data["name"],
            description=data["description"],
            category=data["category"],
            images=data["images"],
            specifications=data["specifications"],
            is_rentable=data["is_rentable"],
            rental_units=_tiers(data["rental_units"]),
            total_quantity=data["inventory"]["total_quantity"],
        )


class ProductPatchSerializer(StrictFieldsMixin, serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    category = serializers.CharField(max_length=100, required=False)
    images = serializers.ListField(child=serializers.CharField(), required=False)
    specifications = serializers.DictField(child=serializers.CharField(), required=False)
    is_rentable = serializers.BooleanField(required=False)
    is_active = serializers.BooleanField(required=False)
    rental_units = TierInputSerializer(many=True, allow_empty=False, required=False)
    inventory = InventoryPatchSerializer(required=False)

    def to_patch(self) -> ProductPatch:
        data = dict(self.validated_data)
        inventory = data.pop("inventory", {})
        rental_units = data.pop("rental_units", None)
        return ProductPatch(
            **data,
            rental_units=_tiers(rental_units) if rental_units is not None else None,
            total_quantity=inventory.get("total_quantity"),
            available_quantity=inventory.get("available_quantity"),
        )


class AvailabilityQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
