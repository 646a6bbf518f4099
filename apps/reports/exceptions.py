"""Errors raised by the report endpoints."""

from __future__ import annotations

from shared.domain.exceptions import DomainValidationError


class MissingReportType(DomainValidationError):
    code = "MISSING_TYPE"
    default_message = "Report type is required"


class InvalidReportType(DomainValidationError):
    code = "INVALID_TYPE"
    default_message = "Invalid report type"
