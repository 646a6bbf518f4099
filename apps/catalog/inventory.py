"""
Inventory counters

The only code allowed to move ``available_quantity`` and
``reserved_quantity``. Each change is a single conditional UPDATE:

    UPDATE product SET available = available - q, reserved = reserved + q
    WHERE id = ? AND available >= q

so two requests racing for the last unit cannot both succeed, whatever they
read beforehand. Zero affected rows means the guard failed.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Tuple
from uuid import UUID

from django.db.models import F  # type: ignore
from django.utils import timezone  # type: ignore

from .exceptions import InsufficientInventory, InventoryInconsistent
from .models import Product

logger = logging.getLogger(__name__)

StockLine = Tuple[UUID, int]


def reserve_stock(product_id: UUID, quantity: int) -> None:
    """Move ``quantity`` units from available to reserved, or raise."""
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")

    updated = Product.objects.filter(pk=product_id, available_quantity__gte=quantity).update(
        available_quantity=F("available_quantity") - quantity,
        reserved_quantity=F("reserved_quantity") + quantity,
        updated_at=timezone.now(),
    )
    if updated == 0:
        available = Product.objects.filter(pk=product_id).values_list("available_quantity", flat=True).first()
        logger.warning(
            f"Reservation of {quantity} unit(s) of product {product_id} refused, available={available}"
        )
        raise InsufficientInventory(
            details={"product_id": str(product_id), "requested": quantity, "available": available or 0}
        )
    logger.debug(f"Reserved {quantity} unit(s) of product {product_id}")


def release_stock(product_id: UUID, quantity: int) -> None:
    """Move ``quantity`` units from reserved back to available."""
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")

    updated = Product.objects.filter(pk=product_id, reserved_quantity__gte=quantity).update(
        available_quantity=F("available_quantity") + quantity,
        reserved_quantity=F("reserved_quantity") - quantity,
        updated_at=timezone.now(),
    )
    if updated == 0:
        logger.error(f"Release of {quantity} unit(s) of product {product_id} exceeds reserved stock")
        raise InventoryInconsistent(details={"product_id": str(product_id), "released": quantity})
    logger.debug(f"Released {quantity} unit(s) of product {product_id}")


def merge_lines(lines: Iterable[StockLine]) -> list[StockLine]:
    """One line per product, ordered by product id.

    Row locks taken by the conditional updates are held until commit, so
    every transaction acquires them in the same order.
    """
    totals: Counter = Counter()
    for product_id, quantity in lines:
        totals[product_id] += quantity
    return sorted(totals.items(), key=lambda line: str(line[0]))


def reserve_items(lines: Iterable[StockLine]) -> None:
    """
    Reserve every line or none

    Lines are merged per product and reserved in product id order; when one
    is refused, the lines already reserved are released again before the
    error propagates. Database errors are left to the enclosing transaction.
    """
    applied: list[StockLine] = []
    try:
        for product_id, quantity in merge_lines(lines):
            reserve_stock(product_id, quantity)
            applied.append((product_id, quantity))
    except InsufficientInventory:
        for product_id, quantity in reversed(applied):
            release_stock(product_id, quantity)
        raise


def release_items(lines: Iterable[StockLine]) -> None:
    for product_id, quantity in merge_lines(lines):
        release_stock(product_id, quantity)
