"""Customer management for administrators."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import viewsets  # type: ignore

from shared.api.responses import envelope

from .exceptions import UserNotFound
from .permissions import IsAdminRole
from .serializers import AdminUserUpdateSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class UserViewSet(viewsets.GenericViewSet):
    """User administration.

    - `list` / `retrieve` browse accounts, newest first, filterable by role
      and active flag
    - `update` changes profile, role or active flag
    - `destroy` deactivates the account; users are never deleted
    """

    serializer_class = UserSerializer
    queryset = User.objects.all().order_by("-created_at")
    permission_classes = [IsAdminRole]
    filterset_fields = ["role", "is_active"]
    envelope_key = "users"

    def get_object(self):  # type: ignore
        try:
            return self.get_queryset().get(pk=self.kwargs["pk"])
        except (User.DoesNotExist, ValueError):
            raise UserNotFound()

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    def retrieve(self, request, pk=None):  # type: ignore
        return envelope(user=self.get_serializer(self.get_object()).data)

    def update(self, request, pk=None, partial=True):  # type: ignore
        user = self.get_object()
        serializer = AdminUserUpdateSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Admin {request.user.email} updated user {user.email}")
        return envelope(user=UserSerializer(user).data)

    partial_update = update

    def destroy(self, request, pk=None):  # type: ignore
        user = self.get_object()
        user.is_active = False
        user.save(update_fields=["is_active", "updated_at"])
        logger.info(f"Admin {request.user.email} deactivated user {user.email}")
        return envelope(message="User deactivated successfully")
