"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment, PaymentTransaction


class PaymentTransactionInline(admin.TabularInline):
    model = PaymentTransaction
    extra = 0
    readonly_fields = ("event", "payload", "status", "created_at")
    can_delete = False


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("payment_intent_id", "booking", "amount", "currency", "method", "status", "paid_at")
    list_filter = ("status", "method")
    search_fields = ("payment_intent_id", "transaction_id", "booking__booking_number")
    readonly_fields = ("payment_intent_id", "transaction_id", "paid_at", "refunded_at", "created_at", "updated_at")
    inlines = [PaymentTransactionInline]
