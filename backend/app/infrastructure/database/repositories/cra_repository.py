"""SQLAlchemy implementation of the CRA aggregate store.

Every public method runs in its own unit of work taken from the injected
``Database`` handle. Writes that touch several rows (create, activity
replacement, delete) are a single transaction: a failure anywhere rolls the
whole aggregate back before the error reaches the caller.
"""

import dataclasses
from uuid import uuid4

from sqlalchemy import Select, delete, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.application.interfaces import CRARepository
from app.domain.entities import CRA, Activity, CRAChanges, CRAStatus, ensure_status_transition
from app.domain.entities.cra_query import CRAFilters, CRAStatistics, Pagination
from app.infrastructure.database.base import utc_now
from app.infrastructure.database.models import ActivityModel, CRAModel
from app.infrastructure.database.repositories.cra_predicates import build_cra_predicates
from app.infrastructure.database.session import Database
from app.infrastructure.logging.colored_logger import StoreLogger, StoreOperation


class SQLAlchemyCRARepository(CRARepository):
    """Implements the CRARepository port on top of a ``Database`` handle."""

    def __init__(self, database: Database):
        self._database = database
        self._log = StoreLogger(__name__)

    # ── Reads ────────────────────────────────────────────────────────

    async def get_all(self, filters: CRAFilters, pagination: Pagination) -> list[CRA]:
        stmt = self._filtered(select(CRAModel), filters)
        stmt = (
            stmt.options(selectinload(CRAModel.activities))
            .order_by(CRAModel.date.desc(), CRAModel.created_at.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        async with self._database.session("list CRAs") as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    async def count(self, filters: CRAFilters) -> int:
        stmt = self._filtered(select(func.count()).select_from(CRAModel), filters)
        async with self._database.session("count CRAs") as session:
            return int(await session.scalar(stmt) or 0)

    async def get_by_id(self, cra_id: str) -> CRA | None:
        async with self._database.session("get CRA") as session:
            model = await self._load(session, cra_id)
            return self._to_entity(model) if model else None

    async def statistics(self, filters: CRAFilters) -> CRAStatistics:
        totals_stmt = self._filtered(
            select(
                func.count(CRAModel.id),
                func.coalesce(func.sum(CRAModel.total_hours), 0),
                func.count(distinct(func.lower(CRAModel.client))),
            ),
            filters,
        )
        status_stmt = self._filtered(
            select(CRAModel.status, func.count(CRAModel.id)), filters
        ).group_by(CRAModel.status)

        async with self._database.session("CRA statistics") as session:
            total_cras, total_hours, active_clients = (await session.execute(totals_stmt)).one()
            by_status = {status: count for status, count in (await session.execute(status_stmt)).all()}

        return CRAStatistics(
            total_cras=int(total_cras),
            total_hours=float(total_hours),
            active_clients=int(active_clients),
            by_status={s.value: by_status.get(s.value, 0) for s in CRAStatus},
        )

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, cra: CRA) -> CRA:
        cra.recompute_total()
        with self._log.timed_operation(
            StoreOperation.CREATE, "Creating CRA",
            cra_id=cra.id, activities=len(cra.activities), total_hours=cra.total_hours,
        ):
            async with self._database.transaction("create CRA") as session:
                session.add(
                    CRAModel(
                        id=cra.id,
                        date=cra.date,
                        client=cra.client,
                        total_hours=cra.total_hours,
                        status=cra.status.value,
                        created_at=cra.created_at,
                        updated_at=cra.updated_at,
                    )
                )
                # Parent row first so activity rows can reference it
                await session.flush()
                for activity in cra.activities:
                    session.add(self._activity_to_model(activity, cra.id))
                await session.flush()

                model = await self._load(session, cra.id)
                return self._to_entity(model)

    async def update(self, cra_id: str, changes: CRAChanges) -> CRA | None:
        operation = StoreOperation.UPDATE if changes.activities is None else StoreOperation.REPLACE
        with self._log.timed_operation(operation, "Updating CRA", cra_id=cra_id):
            async with self._database.transaction("update CRA") as session:
                return await self._apply_changes(session, cra_id, changes)

    async def replace_activities(self, cra_id: str, activities: list[Activity]) -> CRA | None:
        with self._log.timed_operation(
            StoreOperation.REPLACE, "Replacing activities", cra_id=cra_id, activities=len(activities)
        ):
            async with self._database.transaction("replace activities") as session:
                return await self._apply_changes(session, cra_id, CRAChanges(activities=activities))

    async def delete(self, cra_id: str) -> bool:
        with self._log.timed_operation(StoreOperation.DELETE, "Deleting CRA", cra_id=cra_id):
            async with self._database.transaction("delete CRA") as session:
                await session.execute(delete(ActivityModel).where(ActivityModel.cra_id == cra_id))
                result = await session.execute(delete(CRAModel).where(CRAModel.id == cra_id))
                return result.rowcount > 0

    # ── Unit-of-work steps ───────────────────────────────────────────

    async def _apply_changes(
        self, session: AsyncSession, cra_id: str, changes: CRAChanges
    ) -> CRA | None:
        """Scalar update plus optional activity replacement, inside the caller's transaction."""
        result = await session.execute(
            select(CRAModel).where(CRAModel.id == cra_id).with_for_update()
        )
        model = result.scalar_one_or_none()
        if model is None:
            self._log.detail("CRA not found", cra_id=cra_id)
            return None

        cra = self._to_entity(model, with_activities=False)
        if changes.check_transition and changes.status is not None:
            # Checked under the row lock so a concurrent write cannot slip past
            ensure_status_transition(cra.status, changes.status)
        cra.update(date=changes.date, client=changes.client, status=changes.status)

        if changes.activities is not None:
            previous_ids = set(
                (
                    await session.scalars(
                        select(ActivityModel.id).where(ActivityModel.cra_id == cra_id)
                    )
                ).all()
            )
            await session.execute(delete(ActivityModel).where(ActivityModel.cra_id == cra_id))
            cra.replace_activities([_reissue(a, previous_ids) for a in changes.activities])
            for activity in cra.activities:
                session.add(self._activity_to_model(activity, cra_id))
            model.total_hours = cra.total_hours
            self._log.detail(
                "Activities replaced",
                removed=len(previous_ids), inserted=len(cra.activities),
            )

        model.date = cra.date
        model.client = cra.client
        model.status = cra.status.value
        model.updated_at = cra.updated_at
        await session.flush()

        refreshed = await self._load(session, cra_id)
        return self._to_entity(refreshed)

    @staticmethod
    async def _load(session: AsyncSession, cra_id: str) -> CRAModel | None:
        result = await session.execute(
            select(CRAModel)
            .where(CRAModel.id == cra_id)
            .options(selectinload(CRAModel.activities))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _filtered(stmt: Select, filters: CRAFilters) -> Select:
        for predicate in build_cra_predicates(filters):
            stmt = stmt.where(predicate)
        return stmt

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _activity_to_model(activity: Activity, cra_id: str) -> ActivityModel:
        return ActivityModel(
            id=activity.id,
            cra_id=cra_id,
            description=activity.description,
            hours=activity.hours,
            category=activity.category,
            work_date=activity.work_date,
            position=activity.position,
            created_at=activity.created_at,
        )

    @staticmethod
    def _activity_to_entity(model: ActivityModel) -> Activity:
        return Activity(
            id=model.id,
            cra_id=model.cra_id,
            description=model.description,
            hours=float(model.hours),
            category=model.category,
            work_date=model.work_date,
            position=model.position,
            created_at=model.created_at,
        )

    def _to_entity(self, model: CRAModel, *, with_activities: bool = True) -> CRA:
        """Map ORM model → domain aggregate."""
        activities = (
            [self._activity_to_entity(a) for a in model.activities] if with_activities else []
        )
        return CRA(
            id=model.id,
            date=model.date,
            client=model.client,
            status=CRAStatus(model.status),
            total_hours=float(model.total_hours),
            activities=activities,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


def _reissue(activity: Activity, previous_ids: set[str]) -> Activity:
    """Copy an incoming activity as a brand-new row.

    Its id is kept only when it already belonged to this CRA; every other
    field, including ``created_at``, is taken fresh.
    """
    return dataclasses.replace(
        activity,
        id=activity.id if activity.id in previous_ids else str(uuid4()),
        cra_id=None,
        created_at=utc_now(),
    )
