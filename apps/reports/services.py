"""Aggregations behind the admin dashboard, and the record exports."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore

from apps.bookings.models import Booking
from apps.catalog.models import Product
from apps.users.models import CustomUser

from .exceptions import InvalidReportType, MissingReportType

REVENUE_STATUSES = (Booking.Status.ACTIVE, Booking.Status.COMPLETED)


def dashboard_stats(start_date: datetime | None = None, end_date: datetime | None = None) -> dict[str, Any]:
    """Platform statistics; the optional window applies to booking creation."""
    booking_qs = Booking.objects.all()
    if start_date is not None:
        booking_qs = booking_qs.filter(created_at__gte=start_date)
    if end_date is not None:
        booking_qs = booking_qs.filter(created_at__lte=end_date)

    revenue_qs = booking_qs.filter(status__in=REVENUE_STATUSES)
    revenue = revenue_qs.aggregate(
        revenue_sum=models.Sum('total'),
        revenue_avg=models.Avg('total'),
    )

    by_status = {value: 0 for value in Booking.Status.values}
    for row in booking_qs.order_by().values('status').annotate(count=models.Count('id')):
        by_status[row['status']] = row['count']

    low_stock = (
        Product.objects.active()
        .low_stock(settings.LOW_STOCK_THRESHOLD)
        .order_by('available_quantity', 'name')
        .values('id', 'name', 'category', 'available_quantity', 'total_quantity')
    )

    return {
        'total_products': Product.objects.active().count(),
        'total_users': CustomUser.objects.filter(is_active=True).count(),
        'total_bookings': booking_qs.count(),
        'active_rentals': booking_qs.filter(status=Booking.Status.ACTIVE).count(),
        'total_revenue': Decimal(str(revenue['revenue_sum'] or 0)).quantize(Decimal('0.01')),
        'average_booking_value': Decimal(str(revenue['revenue_avg'] or 0)).quantize(Decimal('0.01')),
        'bookings_by_status': by_status,
        'low_stock_products': list(low_stock),
    }


EXPORT_TYPES = ('bookings', 'products', 'users')


def export_queryset(report_type: str | None, start_date: datetime | None = None, end_date: datetime | None = None):
    """Rows of one export; the window only narrows bookings."""
    if not report_type:
        raise MissingReportType()
    if report_type not in EXPORT_TYPES:
        raise InvalidReportType(details={'type': report_type, 'allowed': list(EXPORT_TYPES)})

    if report_type == 'products':
        return Product.objects.active().prefetch_related('rental_units').order_by('name')
    if report_type == 'users':
        return CustomUser.objects.filter(is_active=True).order_by('email')

    queryset = Booking.objects.select_related('customer').prefetch_related('items__product')
    if start_date is not None:
        queryset = queryset.filter(created_at__gte=start_date)
    if end_date is not None:
        queryset = queryset.filter(created_at__lte=end_date)
    return queryset.order_by('-created_at')
