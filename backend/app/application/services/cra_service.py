"""Application service (use case) for CRA operations."""

import logging
from datetime import date

from app.application.interfaces import CRARepository
from app.application.schemas.cra import ActivityInput, CRACreate, CRAUpdate
from app.domain.entities import (
    CRA,
    Activity,
    CRAChanges,
    CRAFilters,
    CRAStatistics,
    Page,
    Pagination,
    validate_activity_set,
)
from app.domain.entities.cra_query import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from app.domain.exceptions import DomainValidationError, EntityNotFoundError

logger = logging.getLogger(__name__)


class CRAService:
    """Orchestrates CRA business rules on top of the repository port (DI).

    Field-level checks happen in the Pydantic DTOs; the rules that span the
    whole aggregate (activity set, reporting date, status changes) live here
    so they hold for every caller, not only HTTP.
    """

    def __init__(
        self,
        repository: CRARepository,
        *,
        enforce_status_transitions: bool = False,
        allow_future_dates: bool = False,
        default_page_limit: int = DEFAULT_PAGE_LIMIT,
        max_page_limit: int = MAX_PAGE_LIMIT,
    ):
        self._repository = repository
        self._enforce_status_transitions = enforce_status_transitions
        self._allow_future_dates = allow_future_dates
        self._default_page_limit = default_page_limit
        self._max_page_limit = max_page_limit

    async def list_cras(
        self,
        filters: CRAFilters,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Page[CRA]:
        self._check_date_range(filters)
        pagination = Pagination.from_params(
            limit,
            offset,
            default_limit=self._default_page_limit,
            max_limit=self._max_page_limit,
        )
        items = await self._repository.get_all(filters, pagination)
        total = await self._repository.count(filters)
        return Page(items=items, total=total, limit=pagination.limit, offset=pagination.offset)

    async def get_cra(self, cra_id: str) -> CRA:
        cra = await self._repository.get_by_id(cra_id)
        if cra is None:
            raise EntityNotFoundError("CRA", cra_id)
        return cra

    async def create_cra(self, data: CRACreate) -> CRA:
        if not self._allow_future_dates and data.date > date.today():
            raise DomainValidationError("The CRA date cannot be in the future", field="date")

        # Identifiers are always server-assigned on creation
        activities = [self._to_activity(item, keep_id=False) for item in data.activities]
        validate_activity_set(activities)

        cra = CRA(date=data.date, client=data.client, status=data.status, activities=activities)
        created = await self._repository.create(cra)
        logger.info(
            "Created CRA %s for '%s' (%d activities, %.2fh)",
            created.id, created.client, len(created.activities), created.total_hours,
        )
        return created

    async def update_cra(self, cra_id: str, data: CRAUpdate) -> CRA:
        await self.get_cra(cra_id)

        activities: list[Activity] | None = None
        if data.activities is not None:
            supplied_ids = [item.id for item in data.activities if item.id]
            if len(supplied_ids) != len(set(supplied_ids)):
                raise DomainValidationError("Duplicate activity id in request", field="activities")
            activities = [self._to_activity(item, keep_id=True) for item in data.activities]
            validate_activity_set(activities)

        changes = CRAChanges(
            date=data.date,
            client=data.client,
            status=data.status,
            activities=activities,
            check_transition=self._enforce_status_transitions,
        )
        updated = await self._repository.update(cra_id, changes)
        if updated is None:
            # Deleted between the existence check and the write
            raise EntityNotFoundError("CRA", cra_id)
        return updated

    async def delete_cra(self, cra_id: str) -> None:
        deleted = await self._repository.delete(cra_id)
        if not deleted:
            raise EntityNotFoundError("CRA", cra_id)
        logger.info("Deleted CRA %s", cra_id)

    async def get_statistics(self, filters: CRAFilters) -> CRAStatistics:
        self._check_date_range(filters)
        return await self._repository.statistics(filters)

    @staticmethod
    def _check_date_range(filters: CRAFilters) -> None:
        if (
            filters.start_date is not None
            and filters.end_date is not None
            and filters.start_date > filters.end_date
        ):
            raise DomainValidationError("startDate must not be after endDate", field="startDate")

    @staticmethod
    def _to_activity(item: ActivityInput, *, keep_id: bool) -> Activity:
        activity = Activity(
            description=item.description,
            hours=item.hours,
            category=item.category,
            work_date=item.work_date,
        )
        if keep_id and item.id:
            activity.id = item.id
        return activity
