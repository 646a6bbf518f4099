"""REST framework exception handler producing the error envelope.

Failures always answer with::

    {"success": false, "error": {"code": "...", "message": "...", "details": ...}}

Domain errors keep their own code and status. REST framework errors are
mapped onto the platform codes below. Anything else is an unexpected failure:
it is logged with its traceback and reported as a generic 500, the traceback
being exposed only when DEBUG is on.
"""

from __future__ import annotations

import logging
import traceback

from django.conf import settings  # type: ignore
from rest_framework import exceptions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

from .responses import error_body

logger = logging.getLogger(__name__)

DRF_ERROR_CODES: list[tuple[type[exceptions.APIException], str, str | None]] = [
    (exceptions.ValidationError, "VALIDATION_ERROR", "Invalid input data"),
    (exceptions.ParseError, "MALFORMED_REQUEST", None),
    (exceptions.NotAuthenticated, "NOT_AUTHENTICATED", "Authentication required"),
    (exceptions.AuthenticationFailed, "INVALID_TOKEN", "Invalid or expired token"),
    (exceptions.PermissionDenied, "ACCESS_DENIED", "Access denied"),
    (exceptions.NotFound, "NOT_FOUND", "Resource not found"),
    (exceptions.MethodNotAllowed, "METHOD_NOT_ALLOWED", None),
    (exceptions.Throttled, "TOO_MANY_REQUESTS", None),
]


def _code_for(exc: exceptions.APIException) -> tuple[str, str | None]:
    for exc_class, code, message in DRF_ERROR_CODES:
        if isinstance(exc, exc_class):
            return code, message
    return str(exc.default_code).upper(), None


def envelope_exception_handler(exc, context):  # type: ignore
    if isinstance(exc, DomainError):
        logger.info(f"Domain error {exc.code}: {exc.message}")
        return Response(error_body(exc.code, exc.message, exc.details), status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(f"Unexpected error in {view.__class__.__name__ if view else 'API'}: {exc}")
        details = traceback.format_exc() if settings.DEBUG else None
        return Response(
            error_body("INTERNAL_SERVER_ERROR", "Something went wrong", details),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # drf_exception_handler converts Http404/PermissionDenied into API exceptions
    if not isinstance(exc, exceptions.APIException):
        exc = exceptions.NotFound() if response.status_code == 404 else exceptions.PermissionDenied()

    code, message = _code_for(exc)
    details = response.data if isinstance(exc, exceptions.ValidationError) else None
    response.data = error_body(code, message or str(exc.detail), details)
    return response
