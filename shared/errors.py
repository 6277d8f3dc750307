"""
Shared error handling for the repos service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class ServiceException(Exception):
    """Base exception for the repos service."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class CacheUnavailableError(ServiceException):
    """Cache store connectivity or protocol errors."""

    def __init__(self, message: str = "Cache unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_UNAVAILABLE", message, details)


class ExternalServiceError(ServiceException):
    """External service errors."""

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class UpstreamNotFoundError(ServiceException):
    """The upstream directory has no such user."""

    def __init__(self, username: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("UPSTREAM_NOT_FOUND", f"User {username} not found", details)


class UpstreamServiceError(ExternalServiceError):
    """Network failure, malformed payload or unexpected status from upstream."""

    def __init__(self, message: str = "Upstream request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("github", message, details)


INTERNAL_ERROR_CONTENT: Dict[str, Any] = {"error": "Internal server error"}
