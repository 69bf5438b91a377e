"""Logging configuration for the Scouty wallet scanner."""

import logging
import sys
import time
import uuid
from typing import Any

import structlog


def configure_logging(log_level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        log_level: The log level to use (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
    logging.getLogger().setLevel(numeric_level)

    # Set third-party loggers to a higher level to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    structlog.get_logger("scouty").info("Logging configured", log_level=log_level.upper())


def get_logger(name: str) -> Any:
    """Get a structured logger with the specified name.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def log_with_context(logger: Any, level: str, message: str, **context) -> None:
    """Log a message with additional key/value context.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        context: Additional context information as keyword arguments
    """
    # Drop empty values so log lines stay compact
    context = {k: v for k, v in context.items() if v is not None}
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(message, **context)


class RequestIdMiddleware:
    """ASGI middleware that tags each HTTP request with a request ID."""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("scouty.middleware")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())
        # Starlette exposes scope["state"] as request.state
        scope.setdefault("state", {})["request_id"] = request_id
        # Left bound after the call so the outer server-error handler still sees it
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        path = scope.get("path", "unknown")
        method = scope.get("method", "unknown")
        log_with_context(
            self.logger,
            "info",
            f"Request received: {method} {path}",
            request_id=request_id,
            method=method,
            path=path
        )

        start_time = time.perf_counter()

        async def wrapped_send(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message["headers"] = headers

                duration = (time.perf_counter() - start_time) * 1000
                log_with_context(
                    self.logger,
                    "info",
                    f"Response: {message.get('status', 0)} - {duration:.2f}ms",
                    request_id=request_id,
                    status=message.get("status", 0),
                    duration_ms=round(duration, 2),
                    method=method,
                    path=path
                )

            await send(message)

        await self.app(scope, receive, wrapped_send)
