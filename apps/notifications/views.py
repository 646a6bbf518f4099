"""API views for notifications."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.users.permissions import IsAdminRole
from shared.api.responses import envelope

from . import services
from .filters import NotificationFilterSet
from .models import Notification
from .serializers import NotificationSerializer, SendNotificationSerializer

logger = logging.getLogger(__name__)


class NotificationViewSet(viewsets.GenericViewSet):
    """Notifications of the authenticated user; `send` is for administrators."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = NotificationFilterSet
    envelope_key = 'notifications'

    def get_permissions(self):  # type: ignore
        if self.action == 'send':
            return [IsAdminRole()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        return Notification.objects.filter(user=self.request.user)

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        response = self.get_paginated_response(NotificationSerializer(page, many=True).data)
        response.data['unread_count'] = services.unread_count(request.user.pk)
        return response

    def destroy(self, request, pk=None):  # type: ignore
        services.delete_notification(request.user.pk, pk)
        return envelope(message='Notification deleted')

    @action(detail=True, methods=['put'])
    def read(self, request, pk=None):  # type: ignore
        notification = services.mark_as_read(request.user.pk, pk)
        return envelope(notification=NotificationSerializer(notification).data)

    @action(detail=False, methods=['put'], url_path='read-all')
    def read_all(self, request):  # type: ignore
        updated = services.mark_all_as_read(request.user.pk)
        return envelope(message='All notifications marked as read', updated=updated)

    @action(detail=False, methods=['post'])
    def send(self, request):  # type: ignore
        serializer = SendNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        notification = services.send_manual_notification(
            data['user_id'], data['type'], data['title'], data['message'], send_email=data['send_email']
        )
        logger.info(f"Admin {request.user.email} sent notification {notification.pk} to user {data['user_id']}")
        return envelope(
            status=status.HTTP_201_CREATED,
            notification=NotificationSerializer(notification).data,
        )
