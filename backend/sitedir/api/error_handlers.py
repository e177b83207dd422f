"""Error Handlers — global exception handlers for the directory API.

Invariants:
    - DirectoryError → {"error": message, "code": code} with the error's own status
    - RequestValidationError → 400 with the joined field messages
    - Exception (catch-all) → 500, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (DirectoryError), validation (Pydantic), catch-all (Exception)
    - 4xx logged at warning, 5xx at error: auth failures are routine, store failures are not
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from sitedir.core.errors import DirectoryError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_directory_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_directory_error_handler(app: FastAPI) -> None:

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        """Handle all directory domain/infrastructure errors."""
        level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
        logger.log(
            level,
            f"DirectoryError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "entry_id": exc.context.entry_id,
                "actor": exc.context.actor,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic/body parsing errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Join field-level errors into one human-readable message."""
    messages = [
        f"{'.'.join(str(loc) for loc in e['loc'] if loc != 'body') or 'body'}: {e['msg']}"
        for e in exc.errors()
    ]
    return {
        "error": ", ".join(messages) or "Invalid request data",
        "code": "VALIDATION_ERROR",
    }
