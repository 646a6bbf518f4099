"""
Domain Error Hierarchy

Every failure the domain reports carries a machine-readable ``code``, a
human-readable ``message`` and the HTTP status the API layer answers with.
Concrete errors are declared next to the bounded context that raises them
(``apps/<context>/exceptions.py``).

Taxonomy:
- DomainValidationError: malformed or inconsistent input (400)
- ConflictError: illegal state transition, inventory shortage (400)
- AccessDeniedError: authenticated but not allowed (403)
- NotFoundError: referenced entity is absent (404)
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors raised by domain and application services."""

    code = "DOMAIN_ERROR"
    status_code = 400
    default_message = "Request cannot be processed"

    def __init__(self, message: str | None = None, *, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class DomainValidationError(DomainError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid input data"


class ConflictError(DomainError):
    code = "CONFLICT"
    default_message = "Operation conflicts with the current state"


class AccessDeniedError(DomainError):
    code = "ACCESS_DENIED"
    status_code = 403
    default_message = "Access denied"


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"
