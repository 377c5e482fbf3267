"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import make_url

from app.config import Settings, get_settings
from app.infrastructure.database import Database
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.error_handlers import setup_exception_handlers
from app.presentation.api.v1.router import router as v1_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists(settings: Settings) -> None:
    """Create the target PostgreSQL database on first start.

    Only ``postgresql://`` URLs are handled; SQLite files are created by the
    driver itself. Failure is logged, and the later connection test reports it.
    """
    url = make_url(settings.database_url)
    if url.get_backend_name() != "postgresql" or not url.database:
        return

    import asyncpg

    db_name = url.database
    maintenance_dsn = url.set(drivername="postgresql", database="postgres").render_as_string(
        hide_password=False
    )

    try:
        conn = await asyncpg.connect(maintenance_dsn)
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not reach PostgreSQL to create '%s': %s", db_name, exc)
        return

    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", db_name):
            logger.debug("Database '%s' already exists", db_name)
            return
        # CREATE DATABASE cannot run inside a transaction block
        quoted = db_name.replace('"', '""')
        await conn.execute(f'CREATE DATABASE "{quoted}"')
        logger.info("Created database '%s'", db_name)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", db_name, exc)
    finally:
        await conn.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — open the database handle, create tables, drain on exit."""
    settings = get_settings()
    setup_logging(settings)

    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        await _ensure_database_exists(settings)
        app.state.database = Database.from_settings(settings)

    database: Database = app.state.database
    await database.create_all()
    if await database.ping():
        logger.info("Database connection successful")
    else:
        logger.error("Failed to connect to database — check that it is running")

    yield

    # Shutdown
    if owns_database:
        await database.dispose()
        app.state.database = None


def create_app(database: Database | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    ``database`` lets callers (tests, scripts) inject an already-built handle;
    otherwise the lifespan builds one from settings and disposes it on exit.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.database = database

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    # Mount API routes
    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=3001,
        reload=True,
    )
