"""Catalog API views."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.users.permissions import IsAdminRole
from shared.api.responses import envelope

from . import services
from .filters import ProductFilterSet
from .models import Product
from .serializers import (
    AvailabilityQuerySerializer,
    ProductCreateSerializer,
    ProductPatchSerializer,
    ProductSerializer,
)

logger = logging.getLogger(__name__)


class ProductViewSet(viewsets.GenericViewSet):
    """Products.

    - `list`, `retrieve` and `availability` are public and only show active
      products
    - create/update/destroy are reserved to administrators; destroy is a soft
      delete
    """

    serializer_class = ProductSerializer
    filterset_class = ProductFilterSet
    envelope_key = "products"

    @property
    def page_size(self) -> int:
        return settings.PRODUCTS_PAGE_SIZE

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "availability"}:
            return [permissions.AllowAny()]
        return [IsAdminRole()]

    def get_queryset(self):  # type: ignore
        return Product.objects.active().prefetch_related("rental_units").order_by("-created_at")

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(ProductSerializer(page, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        product = services.get_product(pk)
        return envelope(product=ProductSerializer(product).data)

    def create(self, request):  # type: ignore
        serializer = ProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = services.create_product(serializer.to_command())
        return envelope(status=status.HTTP_201_CREATED, product=ProductSerializer(product).data)

    def update(self, request, pk=None):  # type: ignore
        serializer = ProductPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = services.update_product(pk, serializer.to_patch())
        return envelope(product=ProductSerializer(product).data)

    partial_update = update

    def destroy(self, request, pk=None):  # type: ignore
        services.deactivate_product(pk)
        logger.info(f"Admin {request.user.email} deactivated product {pk}")
        return envelope(message="Product deleted successfully")

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        result = services.check_availability(
            pk, query.validated_data.get("start_date"), query.validated_data.get("end_date")
        )
        return envelope(
            available=result.available,
            available_quantity=result.available_quantity,
            total_quantity=result.total_quantity,
        )
