"""Translate driver integrity and data errors into constraint violations."""

from sqlalchemy.exc import DBAPIError

from src.domain.exceptions import ConstraintViolationException


_SQLSTATE_CATEGORIES = {
    "23505": "unique",
    "23503": "foreign_key",
    "23502": "not_null",
    "23514": "check",
    "22001": "length",
    "22003": "range",
}

_MESSAGE_CATEGORIES = (
    ("unique", "unique"),
    ("duplicate key", "unique"),
    ("foreign key", "foreign_key"),
    ("not null", "not_null"),
    ("not-null", "not_null"),
    ("check constraint", "check"),
    ("value too long", "length"),
    ("out of range", "range"),
)


def classify_constraint_error(error: DBAPIError) -> ConstraintViolationException:
    """Build a ConstraintViolationException carrying the constraint category.

    asyncpg exposes the SQLSTATE and constraint name on the original
    exception; SQLite only gives a message, so the category is read from it.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    constraint = getattr(orig, "constraint_name", None)

    category = _SQLSTATE_CATEGORIES.get(str(sqlstate)) if sqlstate else None
    if category is None:
        message = str(orig).lower()
        category = next(
            (cat for needle, cat in _MESSAGE_CATEGORIES if needle in message),
            "unknown",
        )

    return ConstraintViolationException(
        f"Constraint violation ({category}): {orig}",
        category=category,
        constraint=constraint,
    )
