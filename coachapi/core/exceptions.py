from fastapi import HTTPException, status
from typing import Optional, Dict, Any


class BaseAPIException(HTTPException):
    """Base exception for API errors

    Subclasses set ``http_status``, ``error_code`` and ``default_message``.
    The HTTP detail is the error envelope:
    ``{"success": false, "error": {"code", "message", "details"}}``.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_001"
    default_message: str = "Internal server error"
    retryable: bool = False

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.details = dict(details or {})
        if self.retryable:
            self.details.setdefault("retryable", True)

        super().__init__(
            status_code=self.http_status,
            detail={
                "success": False,
                "error": {
                    "code": self.error_code,
                    "message": self.message,
                    "details": self.details,
                },
            },
        )

    def __str__(self) -> str:  # Ensure str(e) returns the human message
        return self.message


class AuthenticationError(BaseAPIException):
    """Missing, malformed or expired credentials"""

    http_status = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_001"
    default_message = "Authentication failed"


class ValidationError(BaseAPIException):
    """Invalid input, rejected before any write"""

    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "VALIDATION_001"
    default_message = "Validation failed"


class StorageUnavailableError(BaseAPIException):
    """Transient storage errors (lock timeout, connection loss). Safe to retry."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "STORAGE_001"
    default_message = "Storage temporarily unavailable"
    retryable = True


class InternalServerError(BaseAPIException):
    """Internal server errors"""
