"""Notification services: in-app notifications and their email copy."""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.users.models import CustomUser
from shared.domain.exceptions import NotFoundError

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationNotFound(NotFoundError):
    code = "NOTIFICATION_NOT_FOUND"
    default_message = "Notification not found"


class RecipientNotFound(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"


# ============================================================================
# EMAIL
# ============================================================================

def send_email_notification(recipient_email: str, subject: str, message: str) -> bool:
    """
    Send a plain text email copy of a notification.

    Returns:
        bool: True if the email was handed to the mail backend
    """
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            fail_silently=False,
        )
        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_notification(
    user_id: int,
    type: str,
    title: str,
    message: str,
    *,
    booking_id=None,
    data: dict[str, Any] | None = None,
    send_email: bool = False,
) -> Notification:
    """
    Store an in-app notification, optionally emailing a copy once the
    surrounding transaction commits.
    """
    notification = Notification.objects.create(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        booking_id=booking_id,
        data=data or {},
    )
    logger.info(f"In-app notification {type} created for user {user_id}: {title}")

    if send_email:
        email = CustomUser.objects.filter(pk=user_id).values_list("email", flat=True).first()
        if email:
            transaction.on_commit(lambda: send_email_notification(email, title, message))
    return notification


def send_manual_notification(
    user_id: int, type: str, title: str, message: str, *, send_email: bool = False
) -> Notification:
    """Notification sent by an administrator to one recipient."""
    if not CustomUser.objects.filter(pk=user_id, is_active=True).exists():
        raise RecipientNotFound(details={"user_id": user_id})
    return create_notification(user_id, type, title, message, send_email=send_email)


def get_user_notification(user_id: int, notification_id) -> Notification:
    try:
        return Notification.objects.get(pk=notification_id, user_id=user_id)
    except (Notification.DoesNotExist, ValueError):
        raise NotificationNotFound(details={"notification_id": str(notification_id)})


def mark_as_read(user_id: int, notification_id) -> Notification:
    notification = get_user_notification(user_id, notification_id)
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=["is_read", "read_at"])
    return notification


def mark_all_as_read(user_id: int) -> int:
    return Notification.objects.filter(user_id=user_id).unread().update(is_read=True, read_at=timezone.now())


def delete_notification(user_id: int, notification_id) -> None:
    get_user_notification(user_id, notification_id).delete()


def unread_count(user_id: int) -> int:
    return Notification.objects.filter(user_id=user_id).unread().count()
