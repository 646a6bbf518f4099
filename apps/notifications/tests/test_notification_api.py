"""API tests for notifications."""

from __future__ import annotations

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.handlers import register_handlers
from apps.notifications.models import Notification
from apps.notifications.services import create_notification
from apps.users.models import User
from shared.application.message_bus import message_bus


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(email="customer@example.com", password="secret123")
        self.other = User.objects.create_user(email="other@example.com", password="secret123")
        self.admin = User.objects.create_user(email="admin@example.com", password="secret123", role="admin")
        self.client.force_authenticate(self.user)

    def _notify(self, user=None, type=Notification.Type.BOOKING_REMINDER, title="Reminder") -> Notification:
        return create_notification((user or self.user).pk, type, title, "Pick up your items tomorrow.")

    def test_list_returns_own_notifications_with_unread_count(self) -> None:
        read = self._notify(title="Old")
        read.is_read = True
        read.save()
        self._notify(title="New")
        self._notify(user=self.other)

        response = self.client.get(reverse("notification-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([n["title"] for n in response.data["notifications"]], ["New", "Old"])
        self.assertEqual(response.data["unread_count"], 1)
        self.assertEqual(response.data["pagination"]["total"], 2)

    def test_list_filters_by_read_state(self) -> None:
        read = self._notify(title="Old")
        read.is_read = True
        read.save()
        self._notify(title="New")

        response = self.client.get(reverse("notification-list"), {"is_read": "false"})

        self.assertEqual([n["title"] for n in response.data["notifications"]], ["New"])

    def test_mark_one_as_read(self) -> None:
        notification = self._notify()

        response = self.client.put(reverse("notification-read", args=[notification.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["notification"]["is_read"])
        self.assertIsNotNone(response.data["notification"]["read_at"])

    def test_cannot_touch_someone_elses_notification(self) -> None:
        notification = self._notify(user=self.other)

        read = self.client.put(reverse("notification-read", args=[notification.pk]))
        delete = self.client.delete(reverse("notification-detail", args=[notification.pk]))

        self.assertEqual(read.status_code, status.HTTP_404_NOT_FOUND, read.data)
        self.assertEqual(read.data["error"]["code"], "NOTIFICATION_NOT_FOUND")
        self.assertEqual(delete.status_code, status.HTTP_404_NOT_FOUND, delete.data)
        notification.refresh_from_db()
        self.assertFalse(notification.is_read)

    def test_mark_all_as_read(self) -> None:
        self._notify()
        self._notify()
        self._notify(user=self.other)

        response = self.client.put(reverse("notification-read-all"))

        self.assertEqual(response.data["updated"], 2)
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())
        self.assertTrue(Notification.objects.filter(user=self.other, is_read=False).exists())

    def test_delete_own_notification(self) -> None:
        notification = self._notify()

        response = self.client.delete(reverse("notification-detail", args=[notification.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(Notification.objects.filter(pk=notification.pk).exists())

    def test_admin_sends_notification_with_email_copy(self) -> None:
        self.client.force_authenticate(self.admin)

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                reverse("notification-send"),
                {
                    "user_id": self.user.pk,
                    "type": "booking_reminder",
                    "title": "Pickup tomorrow",
                    "message": "Your rental starts tomorrow at 9:00.",
                    "send_email": True,
                },
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Notification.objects.get(user=self.user).title, "Pickup tomorrow")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["customer@example.com"])

    def test_send_to_unknown_user_is_not_found(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(
            reverse("notification-send"),
            {"user_id": 9999, "type": "late_fee", "title": "Late", "message": "Overdue"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)
        self.assertEqual(response.data["error"]["code"], "USER_NOT_FOUND")

    def test_customer_cannot_send_notifications(self) -> None:
        response = self.client.post(
            reverse("notification-send"),
            {"user_id": self.other.pk, "type": "late_fee", "title": "Late", "message": "Overdue"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_handlers_register_once(self) -> None:
        from apps.bookings.domain.events import BookingConfirmed

        before = len(message_bus.handlers_for(BookingConfirmed))
        register_handlers()

        self.assertEqual(len(message_bus.handlers_for(BookingConfirmed)), before)
        self.assertGreaterEqual(before, 1)
