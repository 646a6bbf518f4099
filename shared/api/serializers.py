"""Serializer helpers shared by the API layers of every app."""

from __future__ import annotations

from collections.abc import Mapping

from rest_framework import serializers  # type: ignore


class StrictFieldsMixin:
    """Reject keys the serializer does not declare instead of ignoring them."""

    def to_internal_value(self, data):  # type: ignore
        if isinstance(data, Mapping):
            unknown = sorted(set(data) - set(self.fields))
            if unknown:
                raise serializers.ValidationError({name: ["Unknown field."] for name in unknown})
        return super().to_internal_value(data)
