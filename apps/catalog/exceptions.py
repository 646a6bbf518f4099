"""Errors raised by the catalog and its inventory counters."""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, DomainValidationError, NotFoundError


class ProductNotFound(NotFoundError):
    code = "PRODUCT_NOT_FOUND"
    default_message = "Product not found"


class ProductInactive(ConflictError):
    code = "PRODUCT_INACTIVE"
    default_message = "Product is no longer active"


class ProductNotRentable(ConflictError):
    code = "PRODUCT_NOT_RENTABLE"
    default_message = "Product is not available for rent"


class RentalUnitNotOffered(DomainValidationError):
    code = "RENTAL_UNIT_NOT_OFFERED"
    default_message = "Product is not offered for the requested rental unit"


class InsufficientInventory(ConflictError):
    code = "INSUFFICIENT_INVENTORY"
    default_message = "Not enough inventory available"


class InventoryInconsistent(ConflictError):
    code = "INVENTORY_INCONSISTENT"
    default_message = "Reserved inventory is lower than the quantity being released"


class InventoryInvariantViolation(DomainValidationError):
    code = "INVENTORY_INVARIANT_VIOLATED"
    default_message = "Available + reserved quantity cannot exceed total quantity"


class MissingDates(DomainValidationError):
    code = "MISSING_DATES"
    default_message = "Start date and end date are required"
