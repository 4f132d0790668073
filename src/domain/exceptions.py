"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base class for domain-level errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ElectionValidationException(DomainException):
    """Inbound election data failed validation before any write."""

    def __init__(self, errors: list[str]):
        super().__init__("Validation failed", {"errors": errors})
        self.errors = errors


class ConstraintViolationException(DomainException):
    """The data store rejected a write.

    Attributes:
        category: unique, foreign_key, not_null, check, length, range
            or unknown
        constraint: Constraint name when the driver reports one
    """

    CATEGORIES = (
        "unique",
        "foreign_key",
        "not_null",
        "check",
        "length",
        "range",
        "unknown",
    )

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        constraint: str | None = None,
    ):
        super().__init__(message, {"category": category, "constraint": constraint})
        self.category = category if category in self.CATEGORIES else "unknown"
        self.constraint = constraint

