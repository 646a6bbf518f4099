"""Page/limit pagination wrapped in the API envelope.

Responses look like::

    {"success": true, "<envelope_key>": [...],
     "pagination": {"page": 1, "limit": 10, "total": 42, "pages": 5}}

Pages past the end return an empty list instead of an error.
"""

from __future__ import annotations

import math

from django.conf import settings  # type: ignore
from rest_framework.pagination import BasePagination  # type: ignore

from .responses import envelope


def _positive_int(raw, default: int, maximum: int | None = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        return min(value, maximum)
    return value


class EnvelopePagination(BasePagination):
    page_query_param = "page"
    limit_query_param = "limit"
    max_limit = 100

    def paginate_queryset(self, queryset, request, view=None):  # type: ignore
        default_limit = getattr(view, "page_size", None) or settings.REST_FRAMEWORK.get("PAGE_SIZE") or 10
        self.envelope_key = getattr(view, "envelope_key", "results")
        self.page = _positive_int(request.query_params.get(self.page_query_param), 1)
        self.limit = _positive_int(request.query_params.get(self.limit_query_param), default_limit, self.max_limit)
        self.total = queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):  # type: ignore
        return envelope(
            **{
                self.envelope_key: data,
                "pagination": {
                    "page": self.page,
                    "limit": self.limit,
                    "total": self.total,
                    "pages": math.ceil(self.total / self.limit),
                },
            }
        )

    def get_paginated_response_schema(self, schema):  # type: ignore
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "results": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "limit": {"type": "integer"},
                        "total": {"type": "integer"},
                        "pages": {"type": "integer"},
                    },
                },
            },
        }
