"""API tests for the product catalog."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Product, RentalUnitTier
from apps.users.models import User


def create_product(**overrides) -> Product:
    fields = {
        "name": "Canon EOS R6",
        "description": "Full-frame mirrorless camera",
        "category": "cameras",
        "total_quantity": 5,
        "available_quantity": 5,
    }
    fields.update(overrides)
    product = Product.objects.create(**fields)
    RentalUnitTier.objects.create(product=product, unit="day", price=Decimal("40.00"))
    return product


class ProductAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="admin@example.com", password="secret123", role="admin")
        self.customer = User.objects.create_user(email="customer@example.com", password="secret123")

    def _payload(self, **overrides):
        payload = {
            "name": "Trek Road Bike",
            "description": "Carbon road bike",
            "category": "bikes",
            "images": ["https://cdn.example.com/bike.jpg"],
            "specifications": {"frame": "M"},
            "rental_units": [
                {"unit": "day", "price": "25.00"},
                {"unit": "week", "price": "150.00", "min_duration": 1, "max_duration": 4},
            ],
            "inventory": {"total_quantity": 3},
        }
        payload.update(overrides)
        return payload

    def test_public_list_hides_inactive_products(self) -> None:
        create_product(name="Visible")
        create_product(name="Hidden", is_active=False)

        response = self.client.get(reverse("product-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([p["name"] for p in response.data["products"]], ["Visible"])
        self.assertEqual(response.data["pagination"]["limit"], 12)
        self.assertEqual(response.data["pagination"]["total"], 1)

    def test_list_filters_by_category_and_search(self) -> None:
        create_product(name="Canon EOS R6", category="cameras")
        create_product(name="Drill", description="Cordless CANON-free drill", category="tools")
        create_product(name="Tent", category="camping")

        response = self.client.get(reverse("product-list"), {"search": "canon"})
        self.assertEqual({p["name"] for p in response.data["products"]}, {"Canon EOS R6", "Drill"})

        response = self.client.get(reverse("product-list"), {"category": "tools", "search": "canon"})
        self.assertEqual([p["name"] for p in response.data["products"]], ["Drill"])

    def test_list_page_past_end_is_empty(self) -> None:
        create_product()
        response = self.client.get(reverse("product-list"), {"page": 5, "limit": 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["products"], [])
        self.assertEqual(response.data["pagination"], {"page": 5, "limit": 2, "total": 1, "pages": 1})

    def test_retrieve_inactive_product_is_not_found(self) -> None:
        product = create_product(is_active=False)
        response = self.client.get(reverse("product-detail", args=[product.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "PRODUCT_NOT_FOUND")

    def test_retrieve_exposes_inventory_block(self) -> None:
        product = create_product()
        response = self.client.get(reverse("product-detail", args=[product.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["product"]["inventory"],
            {"total_quantity": 5, "available_quantity": 5, "reserved_quantity": 0},
        )
        self.assertTrue(response.data["product"]["is_available"])

    def test_admin_creates_product_with_full_availability(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("product-list"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        product = Product.objects.get(pk=response.data["product"]["id"])
        self.assertEqual((product.total_quantity, product.available_quantity, product.reserved_quantity), (3, 3, 0))
        self.assertEqual(list(product.rental_units.values_list("unit", flat=True)), ["day", "week"])

    def test_create_requires_rental_unit(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(reverse("product-list"), self._payload(rental_units=[]), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_create_rejects_zero_quantity(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("product-list"), self._payload(inventory={"total_quantity": 0}), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")

    def test_customer_cannot_create_product(self) -> None:
        self.client.force_authenticate(self.customer)
        response = self.client.post(reverse("product-list"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "ACCESS_DENIED")

    def test_update_rejects_invariant_violation(self) -> None:
        product = create_product(total_quantity=5, available_quantity=3, reserved_quantity=2)
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            reverse("product-detail", args=[product.pk]),
            {"inventory": {"total_quantity": 4}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "INVENTORY_INVARIANT_VIOLATED")
        product.refresh_from_db()
        self.assertEqual(product.total_quantity, 5)

    def test_update_cannot_touch_reserved_quantity(self) -> None:
        product = create_product()
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("product-detail", args=[product.pk]),
            {"inventory": {"reserved_quantity": 0}},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("inventory", response.data["error"]["details"])

    def test_update_rejects_undeclared_fields(self) -> None:
        product = create_product()
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("product-detail", args=[product.pk]),
            {"total_quantity": 10, "bogus": 1},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertEqual(set(response.data["error"]["details"]), {"bogus", "total_quantity"})
        product.refresh_from_db()
        self.assertEqual(product.total_quantity, 5)

    def test_create_rejects_misnested_inventory_keys(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("product-list"),
            self._payload(inventory={"total_quantity": 3, "available_quantity": 2}),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("inventory", response.data["error"]["details"])
        self.assertFalse(Product.objects.filter(name="Trek Road Bike").exists())

    def test_update_fields_and_tiers(self) -> None:
        product = create_product()
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            reverse("product-detail", args=[product.pk]),
            {
                "name": "Canon EOS R6 II",
                "inventory": {"total_quantity": 8, "available_quantity": 8},
                "rental_units": [{"unit": "hour", "price": "9.50", "min_duration": 2}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["product"]["name"], "Canon EOS R6 II")
        self.assertEqual(response.data["product"]["inventory"]["available_quantity"], 8)
        self.assertEqual([t["unit"] for t in response.data["product"]["rental_units"]], ["hour"])

    def test_delete_is_soft(self) -> None:
        product = create_product()
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("product-detail", args=[product.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        product.refresh_from_db()
        self.assertFalse(product.is_active)

    def test_availability_requires_dates(self) -> None:
        product = create_product()
        response = self.client.get(reverse("product-availability", args=[product.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "MISSING_DATES")

    def test_availability_reports_counters(self) -> None:
        product = create_product(total_quantity=5, available_quantity=0, reserved_quantity=5)
        response = self.client.get(
            reverse("product-availability", args=[product.pk]),
            {"start_date": "2030-01-01T10:00:00Z", "end_date": "2030-01-03T10:00:00Z"},
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["available"])
        self.assertEqual(response.data["available_quantity"], 0)
        self.assertEqual(response.data["total_quantity"], 5)
