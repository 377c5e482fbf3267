"""Colored store logger — ANSI-colored console logging for CRA aggregate writes.

Provides a StoreLogger with color-coded output per write operation, making
it easy to follow each unit of work (and its rollback) in the terminal.

Color scheme:
    🟢 Green   — Create
    🔵 Blue    — Update
    🟣 Magenta — Replace activities
    🟡 Yellow  — Delete
    🔴 Red     — Errors / rollbacks
    ⚪ Gray    — Timing / details
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


# ── Operation Definitions ────────────────────────────────────────────

class StoreOperation:
    """Predefined store operations with colors and icons."""

    CREATE = ("CREATE", _Colors.GREEN, "📝")
    UPDATE = ("UPDATE", _Colors.BLUE, "✏️")
    REPLACE = ("REPLACE", _Colors.MAGENTA, "🔁")
    DELETE = ("DELETE", _Colors.YELLOW, "🗑️")


# ── StoreLogger ──────────────────────────────────────────────────────

class StoreLogger:
    """Color-coded logger for aggregate store write operations.

    Usage:
        log = StoreLogger("app.infrastructure.database.cra_store")
        with log.timed_operation(StoreOperation.CREATE, "Creating CRA", cra_id=cra.id):
            ...
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def start(self, operation: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = operation
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.debug(formatted + _details(kwargs))

    def complete(self, operation: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = operation
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _details(kwargs))

    def rollback(self, operation: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a failed unit of work in red."""
        label, _, _ = operation
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}↩ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}" + _details(kwargs))

    @contextmanager
    def timed_operation(
        self, operation: tuple[str, str, str], message: str, **kwargs: Any
    ) -> Iterator[None]:
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_operation(StoreOperation.DELETE, "Deleting CRA", cra_id=cra_id):
                deleted = await ...
        """
        self.start(operation, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.rollback(operation, f"{message} — rolled back after {elapsed:.3f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.complete(operation, f"{message} — {elapsed:.3f}s", **kwargs)


def _details(kwargs: dict[str, Any]) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"
