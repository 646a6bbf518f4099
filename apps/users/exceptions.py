"""Errors raised by the identity flows."""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, DomainValidationError, NotFoundError


class UserAlreadyExists(ConflictError):
    code = "USER_EXISTS"
    default_message = "User already exists with this email"


class InvalidCredentials(DomainValidationError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class AccountDisabled(DomainValidationError):
    code = "ACCOUNT_DISABLED"
    default_message = "Account has been disabled"


class UserNotFound(NotFoundError):
    code = "USER_NOT_FOUND"
    default_message = "User not found"
