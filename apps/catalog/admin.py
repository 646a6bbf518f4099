"""Admin registrations for the catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Product, RentalUnitTier


class RentalUnitTierInline(admin.TabularInline):
    model = RentalUnitTier
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "category",
        "total_quantity",
        "available_quantity",
        "reserved_quantity",
        "is_rentable",
        "is_active",
    )
    list_filter = ("category", "is_rentable", "is_active")
    search_fields = ("name", "description")
    readonly_fields = ("reserved_quantity", "created_at", "updated_at")
    inlines = [RentalUnitTierInline]
