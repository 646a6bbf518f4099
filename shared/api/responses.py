"""Success envelope used by every endpoint: ``{"success": true, ...payload}``."""

from __future__ import annotations

from typing import Any

from rest_framework import status as http_status  # type: ignore
from rest_framework.response import Response  # type: ignore


def envelope(status: int = http_status.HTTP_200_OK, **payload: Any) -> Response:
    return Response({"success": True, **payload}, status=status)


def error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}
