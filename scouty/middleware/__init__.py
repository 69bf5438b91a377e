"""Middleware and exception handlers for the Scouty API."""

from scouty.middleware.error_handler import register_error_handlers

__all__ = ["register_error_handlers"]
