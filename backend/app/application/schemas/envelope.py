"""Response envelope shared by every CRA endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Offset pagination metadata, computed under the same filters as the page."""

    total: int
    limit: int
    offset: int
    has_more: bool = Field(serialization_alias="hasMore")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, error?, message?, pagination?}``.

    Routes serialize with ``exclude_none`` so absent members are omitted.
    """

    success: bool = True
    data: T | None = None
    error: str | None = None
    message: str | None = None
    pagination: PaginationMeta | None = None
