"""
Standard API Response Models

Provides the response envelope for every successful API call:
``{"message": ..., "data": ..., "meta": ...}``. Failures are rendered by the
handlers in ``core.exceptions``.
"""

from typing import TypeVar, Generic, Optional, List, Tuple
from math import ceil

from fastapi import Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Query as SAQuery


T = TypeVar('T')


class PaginationMeta(BaseModel):
    """Standard pagination metadata"""
    current_page: int = Field(description="Current page number (1-indexed)")
    per_page: int = Field(description="Number of items per page")
    total: int = Field(description="Total number of items")
    last_page: int = Field(description="Last page number")
    has_next_page: bool = Field(description="Whether there is a next page")
    has_prev_page: bool = Field(description="Whether there is a previous page")

    @classmethod
    def build(cls, page: int, per_page: int, total: int) -> "PaginationMeta":
        last_page = max(1, ceil(total / per_page)) if per_page > 0 else 1
        return cls(
            current_page=page,
            per_page=per_page,
            total=total,
            last_page=last_page,
            has_next_page=page < last_page,
            has_prev_page=page > 1,
        )


class PageParams(BaseModel):
    page: int = 1
    per_page: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def page_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(10, ge=1, le=100, description="Items per page"),
) -> PageParams:
    return PageParams(page=page, per_page=per_page)


def paginate(query: SAQuery, params: PageParams) -> Tuple[list, PaginationMeta]:
    """Apply OFFSET/LIMIT to an ORM query and compute the meta block."""
    total = query.order_by(None).count()
    items = query.offset(params.offset).limit(params.per_page).all()
    return items, PaginationMeta.build(params.page, params.per_page, total)


class StandardResponse(BaseModel, Generic[T]):
    """
    Standard response envelope for all API endpoints

    Usage:
        return StandardResponse.success(data=order, message="Order created")
        return StandardResponse.paginated(data=orders, meta=meta)
    """
    message: str = Field(description="Human readable status message")
    data: Optional[T] = Field(None, description="Response payload")
    meta: Optional[PaginationMeta] = Field(None, description="Pagination metadata")

    @classmethod
    def success(cls, data: Optional[T] = None, message: str = "Success") -> "StandardResponse[T]":
        return cls(message=message, data=data)

    @classmethod
    def paginated(
        cls, data: List[T], meta: PaginationMeta, message: str = "Success"
    ) -> "StandardResponse[List[T]]":
        return cls(message=message, data=data, meta=meta)
