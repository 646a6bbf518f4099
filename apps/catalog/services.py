"""Catalog use cases: product administration and availability checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Sequence
from uuid import UUID

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import transaction  # type: ignore

from shared.application.uow import lock_queryset_if_possible
from shared.domain.exceptions import DomainValidationError

from .exceptions import MissingDates, ProductNotFound
from .models import Product, RentalUnitTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TierSpec:
    unit: str
    price: Decimal
    min_duration: int = 1
    max_duration: Optional[int] = None


@dataclass
class NewProduct:
    name: str
    description: str
    category: str
    rental_units: Sequence[TierSpec]
    total_quantity: int
    images: list[str] = field(default_factory=list)
    specifications: dict[str, str] = field(default_factory=dict)
    is_rentable: bool = True


@dataclass
class ProductPatch:
    """Administrative changes to a product; ``None`` leaves a field untouched.

    ``reserved_quantity`` is owned by the booking engine and cannot be
    patched.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    images: Optional[list[str]] = None
    specifications: Optional[dict[str, str]] = None
    is_rentable: Optional[bool] = None
    is_active: Optional[bool] = None
    rental_units: Optional[Sequence[TierSpec]] = None
    total_quantity: Optional[int] = None
    available_quantity: Optional[int] = None

    SIMPLE_FIELDS = (
        "name",
        "description",
        "category",
        "images",
        "specifications",
        "is_rentable",
        "is_active",
        "total_quantity",
        "available_quantity",
    )


@dataclass(frozen=True)
class Availability:
    available: bool
    available_quantity: int
    total_quantity: int


def get_product(product_id: UUID | str, *, active_only: bool = True) -> Product:
    queryset = Product.objects.prefetch_related("rental_units")
    if active_only:
        queryset = queryset.active()
    try:
        return queryset.get(pk=product_id)
    except (Product.DoesNotExist, DjangoValidationError, ValueError):
        raise ProductNotFound(details={"product_id": str(product_id)})


def _validate_tiers(tiers: Sequence[TierSpec]) -> None:
    if not tiers:
        raise DomainValidationError("At least one rental unit is required")
    units = [tier.unit for tier in tiers]
    if len(units) != len(set(units)):
        raise DomainValidationError("Each rental unit can only be priced once", details={"units": units})


def _replace_tiers(product: Product, tiers: Sequence[TierSpec]) -> None:
    product.rental_units.all().delete()
    RentalUnitTier.objects.bulk_create(
        RentalUnitTier(
            product=product,
            unit=tier.unit,
            price=tier.price,
            min_duration=tier.min_duration,
            max_duration=tier.max_duration,
            position=position,
        )
        for position, tier in enumerate(tiers)
    )


@transaction.atomic
def create_product(data: NewProduct) -> Product:
    _validate_tiers(data.rental_units)
    if data.total_quantity < 1:
        raise DomainValidationError("Total quantity must be at least 1")

    product = Product(
        name=data.name,
        description=data.description,
        category=data.category,
        images=list(data.images),
        specifications=dict(data.specifications),
        is_rentable=data.is_rentable,
        total_quantity=data.total_quantity,
        available_quantity=data.total_quantity,
        reserved_quantity=0,
    )
    product.validate_inventory()
    product.save()
    _replace_tiers(product, data.rental_units)
    logger.info(f"Created product {product.pk} ({product.name}) with {product.total_quantity} unit(s)")
    return get_product(product.pk, active_only=False)


def update_product(product_id: UUID | str, patch: ProductPatch) -> Product:
    """Apply an administrative patch and revalidate the inventory invariant.

    The product row is locked for the duration so a concurrent reservation
    cannot slip between the check and the write.
    """
    with transaction.atomic():
        try:
            product = lock_queryset_if_possible(Product.objects.filter(pk=product_id)).get()
        except (Product.DoesNotExist, DjangoValidationError, ValueError):
            raise ProductNotFound(details={"product_id": str(product_id)})

        changed: list[str] = []
        for name in ProductPatch.SIMPLE_FIELDS:
            value: Any = getattr(patch, name)
            if value is not None:
                setattr(product, name, value)
                changed.append(name)

        product.validate_inventory()
        product.save()

        if patch.rental_units is not None:
            _validate_tiers(patch.rental_units)
            _replace_tiers(product, patch.rental_units)
            changed.append("rental_units")

    logger.info(f"Updated product {product.pk}: {', '.join(changed) or 'no changes'}")
    return get_product(product.pk, active_only=False)


def deactivate_product(product_id: UUID | str) -> Product:
    """Soft delete; bookings referencing the product are left untouched."""
    product = get_product(product_id, active_only=False)
    product.is_active = False
    product.save(update_fields=["is_active", "updated_at"])
    logger.info(f"Deactivated product {product.pk}")
    return product


def check_availability(
    product_id: UUID | str, start_date: Optional[datetime], end_date: Optional[datetime]
) -> Availability:
    """Inventory-level availability.

    Only the current available counter is consulted; the requested window is
    not compared against other bookings' dates.
    """
    if start_date is None or end_date is None:
        raise MissingDates()
    product = get_product(product_id)
    return Availability(
        available=product.is_available,
        available_quantity=product.available_quantity,
        total_quantity=product.total_quantity,
    )
