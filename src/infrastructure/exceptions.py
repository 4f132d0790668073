"""Infrastructure exceptions."""

from typing import Any


class InfrastructureError(Exception):
    """Base class for infrastructure errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DatabaseError(InfrastructureError):
    """A database operation failed."""


class MediaStorageError(InfrastructureError):
    """The media storage service rejected or failed a request."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
