"""API views for reports.

Dashboard figures for administrators: catalog size, users, bookings,
revenue and the products running low on stock. The export endpoint returns
the full records behind those figures.
"""

from __future__ import annotations

import logging

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import BookingSerializer
from apps.catalog.serializers import ProductSerializer
from apps.users.permissions import IsAdminRole
from apps.users.serializers import UserSerializer
from shared.api.responses import envelope

from .services import dashboard_stats, export_queryset

logger = logging.getLogger(__name__)

EXPORT_SERIALIZERS = {
    'bookings': BookingSerializer,
    'products': ProductSerializer,
    'users': UserSerializer,
}


class DashboardQuerySerializer(serializers.Serializer):
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)


class ExportQuerySerializer(DashboardQuerySerializer):
    type = serializers.CharField(required=False, allow_blank=True)


class DashboardView(APIView):
    """Return the dashboard statistics, optionally for a creation window."""

    permission_classes = [IsAdminRole]

    def get(self, request, format=None):  # type: ignore
        query = DashboardQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = dashboard_stats(query.validated_data.get('start_date'), query.validated_data.get('end_date'))
        return envelope(stats=stats)


class ExportView(APIView):
    """Export bookings, products or users as JSON records."""

    permission_classes = [IsAdminRole]

    def get(self, request, format=None):  # type: ignore
        query = ExportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        report_type = query.validated_data.get('type')
        rows = export_queryset(
            report_type,
            query.validated_data.get('start_date'),
            query.validated_data.get('end_date'),
        )
        data = EXPORT_SERIALIZERS[report_type](rows, many=True).data
        logger.info(f"Admin {request.user.email} exported {len(data)} {report_type} record(s)")
        return envelope(
            type=report_type,
            generated_at=timezone.now().isoformat(),
            count=len(data),
            data=data,
        )
