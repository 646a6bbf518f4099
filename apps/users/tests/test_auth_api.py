"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "Guest@Example.com",
            "password": "secret123",
            "first_name": "Guest",
            "last_name": "User",
            "phone": "+77001234567",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["email"], "guest@example.com")
        self.assertEqual(response.data["user"]["role"], "customer")
        self.assertTrue(User.objects.filter(email="guest@example.com").exists())

    def test_register_duplicate_email_rejected(self) -> None:
        User.objects.create_user(email="dup@example.com", password="secret123")
        payload = {
            "email": "dup@example.com",
            "password": "secret123",
            "first_name": "A",
            "last_name": "B",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "USER_EXISTS")

    def test_register_validation_error_envelope(self) -> None:
        response = self.client.post(reverse("auth:register"), {"email": "bad"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("password", response.data["error"]["details"])

    def test_login_token_carries_role_claim(self) -> None:
        User.objects.create_user(email="admin@example.com", password="secret123", role="admin")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "admin@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        token = AccessToken(response.data["tokens"]["access"])
        self.assertEqual(token["role"], "admin")
        self.assertEqual(token["email"], "admin@example.com")

    def test_login_records_last_login(self) -> None:
        user = User.objects.create_user(email="guest@example.com", password="secret123")
        self.assertIsNone(user.last_login)

        response = self.client.post(
            reverse("auth:login"),
            {"email": "guest@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        user.refresh_from_db()
        self.assertIsNotNone(user.last_login)

    def test_login_wrong_password(self) -> None:
        User.objects.create_user(email="user@example.com", password="secret123")

        response = self.client.post(
            reverse("auth:login"),
            {"email": "user@example.com", "password": "wrong"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "INVALID_CREDENTIALS")

    def test_login_disabled_account(self) -> None:
        User.objects.create_user(email="off@example.com", password="secret123", is_active=False)

        response = self.client.post(
            reverse("auth:login"),
            {"email": "off@example.com", "password": "secret123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "ACCOUNT_DISABLED")

    def test_profile_requires_authentication(self) -> None:
        response = self.client.get(reverse("auth:profile"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "NOT_AUTHENTICATED")

    def test_invalid_token_rejected(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = self.client.get(reverse("auth:profile"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "INVALID_TOKEN")

    def test_profile_update_with_bearer_token(self) -> None:
        User.objects.create_user(email="me@example.com", password="secret123", first_name="Old")
        login = self.client.post(
            reverse("auth:login"),
            {"email": "me@example.com", "password": "secret123"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['tokens']['access']}")

        response = self.client.put(
            reverse("auth:profile"),
            {"first_name": "New", "address": {"city": "Pune"}, "role": "admin"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["first_name"], "New")
        self.assertEqual(response.data["user"]["address"]["city"], "Pune")
        # role is read-only on the profile
        self.assertEqual(response.data["user"]["role"], "customer")
