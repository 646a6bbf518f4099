"""API tests for customer administration."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class UserAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="admin@example.com", password="secret123", role="admin")
        self.customer = User.objects.create_user(email="customer@example.com", password="secret123")

    def test_customer_cannot_list_users(self) -> None:
        self.client.force_authenticate(self.customer)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"]["code"], "ACCESS_DENIED")

    def test_admin_lists_users_with_pagination(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-list"), {"role": "customer"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([u["email"] for u in response.data["users"]], ["customer@example.com"])
        self.assertEqual(response.data["pagination"], {"page": 1, "limit": 10, "total": 1, "pages": 1})

    def test_admin_deactivates_user(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("user-detail", args=[self.customer.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.customer.refresh_from_db()
        self.assertFalse(self.customer.is_active)
        self.assertTrue(User.objects.filter(pk=self.customer.pk).exists())

    def test_admin_changes_role(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.put(
            reverse("user-detail", args=[self.customer.pk]), {"role": "admin"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.customer.refresh_from_db()
        self.assertTrue(self.customer.is_admin())

    def test_unknown_user_returns_not_found(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-detail", args=[999999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "USER_NOT_FOUND")
