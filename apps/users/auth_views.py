"""Views for authentication flows (register, login, profile)."""

from __future__ import annotations

import logging

from django.contrib.auth.models import update_last_login  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from shared.api.responses import envelope

from .auth_serializers import LoginSerializer, RegisterSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    refresh["email"] = user.email
    refresh["role"] = user.role
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Registered customer {user.email}")
        return envelope(
            status=status.HTTP_201_CREATED,
            user=UserSerializer(user).data,
            tokens=_tokens_for_user(user),
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        update_last_login(None, user)
        return envelope(user=UserSerializer(user).data, tokens=_tokens_for_user(user))


class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        return envelope(user=UserSerializer(request.user).data)

    def put(self, request):  # type: ignore
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return envelope(user=UserSerializer(user).data)

    patch = put
