"""Errors raised by the payment ledger."""

from __future__ import annotations

from shared.domain.exceptions import AccessDeniedError, ConflictError, NotFoundError


class PaymentNotFound(NotFoundError):
    code = "PAYMENT_NOT_FOUND"
    default_message = "Payment not found"


class PaymentAccessDenied(AccessDeniedError):
    code = "ACCESS_DENIED"


class InvalidPaymentStatus(ConflictError):
    code = "INVALID_PAYMENT_STATUS"
    default_message = "Payment cannot be processed in its current status"
