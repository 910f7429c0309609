"""Error Handlers — global exception handlers for the CrudServe API.

Invariants:
    - CrudServeError → structured JSON with its own status, code, message, severity
    - Exception (catch-all) → 500, never leaks internal details
    - 4xx logged as warnings, 5xx as errors

Design Decisions:
    - Two-layer handler: domain (CrudServeError), catch-all (Exception)
    - No RequestValidationError layer: dispatch endpoints decode bodies themselves
      and raise DecodeError, so FastAPI's body validation never runs
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from crudserve.core.errors import CrudServeError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_crudserve_error_handler(app)
    _register_generic_error_handler(app)


def _register_crudserve_error_handler(app: FastAPI) -> None:
    """Register dispatch/storage error handler."""

    @app.exception_handler(CrudServeError)
    async def crudserve_error_handler(request: Request, exc: CrudServeError):
        """Handle all CrudServe errors raised while serving a request."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"CrudServeError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )
