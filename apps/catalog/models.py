"""Catalog models: products, rental-unit pricing tiers and inventory."""

from __future__ import annotations

import uuid

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .exceptions import InventoryInvariantViolation


class RentalUnit(models.TextChoices):
    HOUR = "hour", _("Hour")
    DAY = "day", _("Day")
    WEEK = "week", _("Week")
    MONTH = "month", _("Month")
    YEAR = "year", _("Year")


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def low_stock(self, threshold: int):
        return self.active().filter(available_quantity__lte=threshold)


class Product(models.Model):
    """Rentable product.

    Inventory invariant: ``available_quantity + reserved_quantity <=
    total_quantity``. Administrative writes are checked in Python by
    :meth:`validate_inventory` and every write by a database constraint.
    Products are never physically deleted, only deactivated.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField()
    category = models.CharField(max_length=100, db_index=True)
    images = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    is_rentable = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)

    total_quantity = models.PositiveIntegerField(default=0)
    available_quantity = models.PositiveIntegerField(default=0)
    reserved_quantity = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["category", "is_active"]),
            models.Index(fields=["is_rentable", "is_active"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_quantity__gte=F("available_quantity") + F("reserved_quantity")),
                name="product_inventory_within_total",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def is_available(self) -> bool:
        return self.available_quantity > 0

    def validate_inventory(self) -> None:
        if self.available_quantity + self.reserved_quantity > self.total_quantity:
            raise InventoryInvariantViolation(
                details={
                    "total_quantity": self.total_quantity,
                    "available_quantity": self.available_quantity,
                    "reserved_quantity": self.reserved_quantity,
                }
            )

    def tier_for(self, unit: str) -> "RentalUnitTier | None":
        for tier in self.rental_units.all():
            if tier.unit == unit:
                return tier
        return None


class RentalUnitTier(models.Model):
    """Price of one rental unit (hour, day, ...) and its duration bounds."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="rental_units")
    unit = models.CharField(max_length=10, choices=RentalUnit.choices)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    min_duration = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    max_duration = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        verbose_name = _("Rental unit tier")
        verbose_name_plural = _("Rental unit tiers")
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(fields=["product", "unit"], name="unique_rental_unit_per_product"),
            models.CheckConstraint(condition=Q(price__gte=0), name="rental_unit_price_non_negative"),
            models.CheckConstraint(condition=Q(min_duration__gte=1), name="rental_unit_min_duration_positive"),
            models.CheckConstraint(
                condition=Q(max_duration__isnull=True) | Q(max_duration__gte=F("min_duration")),
                name="rental_unit_max_not_below_min",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id}: {self.price} per {self.unit}"

    def accepts(self, duration: int) -> bool:
        if duration < self.min_duration:
            return False
        return self.max_duration is None or duration <= self.max_duration
