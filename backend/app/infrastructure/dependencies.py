"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.application.services import CRAService
from app.infrastructure.database.session import Database
from app.infrastructure.database.repositories import SQLAlchemyCRARepository


def get_database(request: Request) -> Database:
    """Return the ``Database`` handle created by the application lifespan."""
    database: Database | None = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialised; was the lifespan started?")
    return database


async def get_cra_service(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[CRAService, None]:
    """Provides a CRAService instance with its repository wired up."""
    repository = SQLAlchemyCRARepository(database)
    yield CRAService(
        repository,
        enforce_status_transitions=settings.enforce_status_transitions,
        allow_future_dates=settings.allow_future_dates,
        default_page_limit=settings.default_page_limit,
        max_page_limit=settings.max_page_limit,
    )
