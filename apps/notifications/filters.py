"""Filters for notifications."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Notification


class NotificationFilterSet(django_filters.FilterSet):
    is_read = django_filters.BooleanFilter()
    type = django_filters.ChoiceFilter(choices=Notification.Type.choices)

    class Meta:
        model = Notification
        fields = ['is_read', 'type']
