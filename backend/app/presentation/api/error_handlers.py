"""Exception handlers rendering every failure in the API response envelope."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.domain.exceptions import (
    ConnectivityError,
    DomainValidationError,
    EntityNotFoundError,
    TransactionError,
)

logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message},
    )


def _internal_message(exc: Exception, fallback: str) -> str:
    """Echo the underlying error only in development."""
    return str(exc) if get_settings().is_development else fallback


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid input"


def setup_exception_handlers(app: FastAPI) -> None:
    """Map the domain error taxonomy onto fixed HTTP statuses."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return _envelope(exc.status_code, HTTPStatus(exc.status_code).phrase, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _envelope(
            status.HTTP_400_BAD_REQUEST, "Invalid input", _format_validation_errors(exc)
        )

    @app.exception_handler(DomainValidationError)
    async def domain_validation_handler(request: Request, exc: DomainValidationError) -> JSONResponse:
        return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid input", exc.message)

    @app.exception_handler(EntityNotFoundError)
    async def not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
        return _envelope(status.HTTP_404_NOT_FOUND, f"{exc.entity_type} not found", str(exc))

    @app.exception_handler(TransactionError)
    async def transaction_error_handler(request: Request, exc: TransactionError) -> JSONResponse:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Transaction failed",
            _internal_message(exc, "The operation failed and was rolled back"),
        )

    @app.exception_handler(ConnectivityError)
    async def connectivity_error_handler(request: Request, exc: ConnectivityError) -> JSONResponse:
        logger.error("%s %s: %s", request.method, request.url.path, exc)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database unavailable",
            _internal_message(exc, "The database is temporarily unavailable"),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            _internal_message(exc, "An unexpected error occurred"),
        )
