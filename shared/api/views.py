"""Platform endpoints that belong to no bounded context."""

from __future__ import annotations

from django.http import JsonResponse  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework.decorators import api_view, permission_classes  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore

from .responses import error_body


@api_view(["GET"])
@permission_classes([AllowAny])
def health(request):
    return Response({"success": True, "status": "OK", "timestamp": timezone.now().isoformat()})


def route_not_found(request, exception=None):
    """Django ``handler404``: unknown routes answer with the error envelope."""
    return JsonResponse(error_body("NOT_FOUND", "Route not found"), status=404)
