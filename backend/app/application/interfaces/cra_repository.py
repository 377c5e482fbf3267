"""Abstract repository interface (port) for the CRA aggregate."""

from abc import ABC, abstractmethod

from app.domain.entities import CRA, Activity, CRAChanges
from app.domain.entities.cra_query import CRAFilters, CRAStatistics, Pagination


class CRARepository(ABC):
    """Port for CRA persistence — implemented in the infrastructure layer.

    The CRA and its activities are one consistency boundary: every write
    below is all-or-nothing, and every CRA handed back carries its full,
    ordered activity list with ``total_hours`` equal to their sum.
    """

    @abstractmethod
    async def get_all(self, filters: CRAFilters, pagination: Pagination) -> list[CRA]:
        """Matching CRAs ordered by date, then creation time, newest first."""
        ...

    @abstractmethod
    async def count(self, filters: CRAFilters) -> int:
        """Number of CRAs matching ``filters`` (no pagination)."""
        ...

    @abstractmethod
    async def get_by_id(self, cra_id: str) -> CRA | None:
        """Retrieve a single aggregate, or None when it does not exist."""
        ...

    @abstractmethod
    async def create(self, cra: CRA) -> CRA:
        """Persist a new CRA together with all of its activities."""
        ...

    @abstractmethod
    async def update(self, cra_id: str, changes: CRAChanges) -> CRA | None:
        """Apply a partial update. Returns None if the CRA does not exist."""
        ...

    @abstractmethod
    async def replace_activities(self, cra_id: str, activities: list[Activity]) -> CRA | None:
        """Discard every activity of the CRA and insert ``activities`` instead."""
        ...

    @abstractmethod
    async def delete(self, cra_id: str) -> bool:
        """Delete a CRA and its activities. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def statistics(self, filters: CRAFilters) -> CRAStatistics:
        """Dashboard aggregates over the CRAs matching ``filters``."""
        ...
