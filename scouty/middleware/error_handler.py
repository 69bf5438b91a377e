"""
Error handlers for the API.

Every error response has the body ``{"error": <message>}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from scouty.logging_config import get_logger
from scouty.utils.errors import ScoutyError

logger = get_logger("scouty.api.errors")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers for the application."""

    @app.exception_handler(ScoutyError)
    async def scouty_error_handler(request: Request, exc: ScoutyError):
        """Handle application errors."""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Request failed",
            code=exc.code.value,
            status_code=exc.status_code,
            error=exc.message,
            details=exc.details,
            path=request.url.path
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle malformed request bodies and parameters."""
        errors = exc.errors()
        logger.warning(
            "Invalid request",
            errors=[error.get("msg") for error in errors],
            path=request.url.path
        )
        if any(error.get("loc", ("body",))[0] == "body" for error in errors):
            return error_response(400, "Invalid request body")
        return error_response(400, "Invalid request parameters")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path
        )
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all uncaught exceptions."""
        logger.exception(
            "Uncaught exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method
        )
        response = error_response(500, "Internal server error")
        # Runs outside RequestIdMiddleware, which never sees this response
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        if request_id:
            response.headers["x-request-id"] = request_id
        return response
