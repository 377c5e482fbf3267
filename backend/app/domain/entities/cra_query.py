"""Domain value objects for listing CRAs — filters, pagination and result pages."""

from dataclasses import dataclass, field
from datetime import date
from typing import Generic, TypeVar

from app.domain.entities.cra import CRAStatus

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 500


@dataclass(frozen=True)
class CRAFilters:
    """Optional, conjunctive filter criteria. ``None`` fields are ignored."""

    status: CRAStatus | None = None
    client: str | None = None  # case-insensitive substring
    start_date: date | None = None  # inclusive
    end_date: date | None = None  # inclusive


@dataclass(frozen=True)
class Pagination:
    """Limit/offset window applied after ordering."""

    limit: int = DEFAULT_PAGE_LIMIT
    offset: int = 0

    @classmethod
    def from_params(
        cls,
        limit: int | None = None,
        offset: int | None = None,
        *,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ) -> "Pagination":
        """Build a window from raw query values, clamping instead of failing.

        Missing or non-positive limits fall back to ``default_limit``; limits
        above ``max_limit`` are capped; negative offsets become 0.
        """
        if limit is None or limit <= 0:
            limit = default_limit
        limit = min(limit, max_limit)
        if offset is None or offset < 0:
            offset = 0
        return cls(limit=limit, offset=offset)


@dataclass
class Page(Generic[T]):
    """One page of results plus the total under the same filters."""

    items: list[T]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total


@dataclass
class CRAStatistics:
    """Dashboard aggregates over the CRAs matching a filter."""

    total_cras: int = 0
    total_hours: float = 0.0
    active_clients: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
