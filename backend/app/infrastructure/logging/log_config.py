"""Logging setup for the CRA API.

Each Settings log field controls a group of loggers, so the SQL echo of
SQLAlchemy or the store's write trace can be turned up or down on its own.
In development the output is human-oriented; elsewhere every line carries a
timestamp for log shippers.

Usage:
    from app.infrastructure.logging.log_config import setup_logging
    setup_logging(settings)   # once, from the FastAPI lifespan
"""

import logging
import sys

from app.config import Settings, get_settings

_DEV_FORMAT = "%(levelname)-8s %(name)s — %(message)s"
_PROD_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(process)d] %(message)s"

# Settings field → loggers whose level it sets
_LOGGER_GROUPS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_store": ("app.infrastructure.database",),
}

_HANDLER_NAME = "cra-api"


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-group log levels from ``settings``.

    Safe to call more than once: the stderr handler is installed only the
    first time, when nothing else (uvicorn, pytest) has configured the root
    logger already.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(
            logging.Formatter(_DEV_FORMAT if settings.is_development else _PROD_FORMAT)
        )
        root.addHandler(handler)

    levels = {}
    for field_name, logger_names in _LOGGER_GROUPS.items():
        level = _parse_level(getattr(settings, field_name))
        levels[field_name] = logging.getLevelName(level)
        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured (root=%s, %s)",
        settings.log_level,
        ", ".join(f"{k}={v}" for k, v in levels.items()),
    )


def _parse_level(raw: str) -> int:
    """Map a level name to its numeric value; unknown names fall back to INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
