"""Tests for the conditional inventory updates."""

from __future__ import annotations

from unittest import mock

from django.db import DatabaseError, IntegrityError, transaction
from django.test import TestCase

from apps.catalog.exceptions import InsufficientInventory, InventoryInconsistent
from apps.catalog.inventory import merge_lines, release_items, release_stock, reserve_items, reserve_stock
from apps.catalog.models import Product


def make_product(total: int = 5, available: int | None = None, reserved: int = 0) -> Product:
    return Product.objects.create(
        name="Kayak",
        description="Two-seat kayak",
        category="water",
        total_quantity=total,
        available_quantity=total if available is None else available,
        reserved_quantity=reserved,
    )


class InventoryTests(TestCase):
    def test_reserve_moves_units_to_reserved(self) -> None:
        product = make_product(total=5)
        reserve_stock(product.pk, 2)
        product.refresh_from_db()
        self.assertEqual((product.available_quantity, product.reserved_quantity), (3, 2))

    def test_reserve_refuses_more_than_available(self) -> None:
        product = make_product(total=1)
        with self.assertRaises(InsufficientInventory) as ctx:
            reserve_stock(product.pk, 2)
        self.assertEqual(ctx.exception.details["available"], 1)
        product.refresh_from_db()
        self.assertEqual((product.available_quantity, product.reserved_quantity), (1, 0))

    def test_stale_read_cannot_oversell(self) -> None:
        product = make_product(total=1)
        stale_copy = Product.objects.get(pk=product.pk)

        reserve_stock(product.pk, 1)
        # the second caller still believes one unit is free
        self.assertEqual(stale_copy.available_quantity, 1)
        with self.assertRaises(InsufficientInventory):
            reserve_stock(stale_copy.pk, 1)

        product.refresh_from_db()
        self.assertEqual((product.available_quantity, product.reserved_quantity), (0, 1))

    def test_release_restores_counters(self) -> None:
        product = make_product(total=4)
        reserve_stock(product.pk, 3)
        release_stock(product.pk, 3)
        product.refresh_from_db()
        self.assertEqual((product.available_quantity, product.reserved_quantity), (4, 0))

    def test_release_more_than_reserved_is_refused(self) -> None:
        product = make_product(total=4)
        with self.assertRaises(InventoryInconsistent):
            release_stock(product.pk, 1)

    def test_reserve_items_compensates_on_failure(self) -> None:
        plenty = make_product(total=5)
        scarce = make_product(total=1)

        with self.assertRaises(InsufficientInventory):
            reserve_items([(plenty.pk, 2), (scarce.pk, 2)])

        plenty.refresh_from_db()
        scarce.refresh_from_db()
        self.assertEqual((plenty.available_quantity, plenty.reserved_quantity), (5, 0))
        self.assertEqual((scarce.available_quantity, scarce.reserved_quantity), (1, 0))

    def test_database_rejects_invariant_violation(self) -> None:
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                make_product(total=2, available=2, reserved=1)

    def test_lines_are_merged_and_ordered_by_product(self) -> None:
        first, second = sorted((make_product(total=5), make_product(total=5)), key=lambda p: str(p.pk))

        self.assertEqual(
            merge_lines([(second.pk, 1), (first.pk, 2), (second.pk, 2)]),
            [(first.pk, 2), (second.pk, 3)],
        )

    def test_reservation_order_does_not_follow_request_order(self) -> None:
        first, second = sorted((make_product(total=5), make_product(total=5)), key=lambda p: str(p.pk))

        with mock.patch("apps.catalog.inventory.reserve_stock") as reserve:
            reserve_items([(second.pk, 1), (first.pk, 1)])
        with mock.patch("apps.catalog.inventory.release_stock") as release:
            release_items([(second.pk, 1), (first.pk, 1)])

        self.assertEqual(reserve.call_args_list, [mock.call(first.pk, 1), mock.call(second.pk, 1)])
        self.assertEqual(release.call_args_list, [mock.call(first.pk, 1), mock.call(second.pk, 1)])

    def test_database_errors_skip_compensation(self) -> None:
        first, second = sorted((make_product(total=5), make_product(total=5)), key=lambda p: str(p.pk))

        with mock.patch("apps.catalog.inventory.reserve_stock", side_effect=[None, DatabaseError("deadlock detected")]):
            with mock.patch("apps.catalog.inventory.release_stock") as release:
                with self.assertRaises(DatabaseError):
                    reserve_items([(first.pk, 1), (second.pk, 1)])

        release.assert_not_called()

    def test_duplicate_lines_are_reserved_as_one(self) -> None:
        product = make_product(total=3)

        with self.assertRaises(InsufficientInventory) as ctx:
            reserve_items([(product.pk, 2), (product.pk, 2)])

        self.assertEqual(ctx.exception.details["requested"], 4)
        product.refresh_from_db()
        self.assertEqual((product.available_quantity, product.reserved_quantity), (3, 0))
