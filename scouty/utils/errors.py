"""
Error handling utilities for the Scouty wallet scanner.

This module defines the exception taxonomy shared by the scorer, the
chain-data and persistence collaborators and the HTTP layer.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for the Scouty API."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DATA_FETCH_ERROR = "DATA_FETCH_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str


class ScoutyError(Exception):
    """Base exception for all Scouty errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize a new Scouty error.

        Args:
            message: Error message
            code: Error code
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ScoutyError):
    """Missing or malformed request body or wallet address."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            details=details
        )


class DataFetchError(ScoutyError):
    """The chain-data collaborator could not produce observables."""

    def __init__(
        self,
        message: str = "Failed to fetch wallet data",
        address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = dict(details or {})
        if address:
            error_details["address"] = address
        super().__init__(
            message=message,
            code=ErrorCode.DATA_FETCH_ERROR,
            status_code=500,
            details=error_details
        )


class InvalidInputError(ScoutyError):
    """A wallet observable is negative, non-finite or of the wrong type."""

    def __init__(self, field_name: str, value: Any, reason: str):
        self.field_name = field_name
        self.value = value
        super().__init__(
            message=f"Invalid observable '{field_name}': {reason}",
            code=ErrorCode.INVALID_INPUT,
            status_code=500,
            details={"field": field_name, "value": repr(value)}
        )


class PersistenceError(ScoutyError):
    """The scan store failed to read or write."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=ErrorCode.PERSISTENCE_ERROR,
            status_code=500,
            details=details
        )


class ConfigurationError(ScoutyError):
    """Invalid or missing application configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=ErrorCode.CONFIGURATION_ERROR,
            status_code=500,
            details=details
        )
