"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PHONE_VALIDATOR

User = get_user_model()

ADDRESS_KEYS = ("street", "city", "state", "zip_code", "country")


class AddressSerializer(serializers.Serializer):
    street = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    state = serializers.CharField(required=False, allow_blank=True)
    zip_code = serializers.CharField(required=False, allow_blank=True)
    country = serializers.CharField(required=False, allow_blank=True)


class UserSerializer(serializers.ModelSerializer):
    """Main user serializer, used for the profile and in auth responses."""

    full_name = serializers.CharField(read_only=True)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
    address = AddressSerializer(required=False)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "phone",
            "address",
            "role",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "role",
            "is_active",
            "created_at",
            "updated_at",
        ]

    def update(self, instance, validated_data):  # type: ignore
        address = validated_data.pop("address", None)
        if address is not None:
            instance.address = {**(instance.address or {}), **address}
        return super().update(instance, validated_data)


class AdminUserUpdateSerializer(UserSerializer):
    """Administrators may also change the role and deactivate accounts."""

    class Meta(UserSerializer.Meta):
        read_only_fields = ["id", "email", "created_at", "updated_at"]
