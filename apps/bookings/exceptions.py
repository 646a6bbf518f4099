"""Errors raised by the booking engine."""

from __future__ import annotations

from shared.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    DomainValidationError,
    NotFoundError,
)


class BookingNotFound(NotFoundError):
    code = "BOOKING_NOT_FOUND"
    default_message = "Booking not found"


class BookingAccessDenied(AccessDeniedError):
    code = "ACCESS_DENIED"


class InvalidStatusTransition(ConflictError):
    code = "INVALID_STATUS"
    default_message = "Booking cannot change to the requested status"


class InvalidDateRange(DomainValidationError):
    code = "INVALID_DATE_RANGE"
    default_message = "End date must be after start date"


class StartDateInPast(DomainValidationError):
    code = "START_DATE_IN_PAST"
    default_message = "Start date cannot be in the past"


class DurationOutOfRange(DomainValidationError):
    code = "DURATION_OUT_OF_RANGE"
    default_message = "Rental duration is outside the limits of the rental unit"


class PricingMismatch(DomainValidationError):
    code = "PRICING_MISMATCH"
    default_message = "Submitted pricing does not match the current product prices"
