"""Standardized JSON response envelope helpers."""


import math
from typing import Generic, TypeVar

from pydantic import BaseModel

from propcomply.core.pagination import PageMeta, PaginationParams

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Single-item response envelope: `{ data: ... }`"""

    data: T


class ListResponse(BaseModel, Generic[T]):
    """Paginated list response envelope: `{ data: [...], meta: {...} }`"""

    data: list[T]
    meta: PageMeta


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers: `{ error: {code, message} }`"""

    error: ErrorDetail


def paginated(items: list, total: int, pagination: PaginationParams) -> dict:
    """Build a paginated response dict for use with ListResponse."""
    return {
        "data": items,
        "meta": {
            "total": total,
            "page": pagination.page,
            "limit": pagination.limit,
            "pages": math.ceil(total / pagination.limit) if pagination.limit else 1,
        },
    }
