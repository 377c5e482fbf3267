"""Health check endpoint — reports the app version and database connectivity."""

from fastapi import APIRouter, Depends

from app.config import get_settings
from app.infrastructure.database.session import Database
from app.infrastructure.dependencies import get_database

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(database: Database = Depends(get_database)) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    connected = await database.ping()
    return {
        "status": "healthy" if connected else "degraded",
        "version": settings.app_version,
        "environment": settings.app_env,
        "database": "connected" if connected else "disconnected",
    }
