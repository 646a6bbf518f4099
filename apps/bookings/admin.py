"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingItem


class BookingItemInline(admin.TabularInline):
    model = BookingItem
    extra = 0
    readonly_fields = ("product", "quantity", "unit_price", "rental_unit", "duration")
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_number",
        "customer",
        "status",
        "payment_status",
        "start_date",
        "end_date",
        "total",
        "created_at",
    )
    list_filter = ("status", "payment_status", "start_date", "end_date")
    search_fields = ("booking_number", "customer__email")
    inlines = [BookingItemInline]
    # Status changes must go through the booking handlers to keep inventory in sync
    readonly_fields = (
        "booking_number",
        "status",
        "subtotal",
        "discount",
        "late_fees",
        "total",
        "confirmed_at",
        "activated_at",
        "completed_at",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
