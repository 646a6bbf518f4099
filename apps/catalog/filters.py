"""FilterSet definitions for product listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Product


class ProductFilterSet(django_filters.FilterSet):
    """Category match and case-insensitive search over name and description."""

    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    search = django_filters.CharFilter(method="filter_search")
    is_rentable = django_filters.BooleanFilter(field_name="is_rentable")

    class Meta:
        model = Product
        fields = ["category", "is_rentable"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))
