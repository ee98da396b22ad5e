"""Translation of SQLAlchemy failures into domain errors."""

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from task_api.errors import DatabaseError, DomainError, DuplicateResourceError, NotFoundError

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION:
        return True
    # SQLite reports primary key and unique conflicts with the same text
    return "UNIQUE constraint failed" in str(orig)


def map_storage_error(exc: SQLAlchemyError) -> DomainError:
    """
    Classify a storage failure into exactly one domain error.

    - Missing row -> NotFoundError
    - Uniqueness/key conflict -> DuplicateResourceError
    - Anything else -> DatabaseError carrying the original message
    """
    if isinstance(exc, NoResultFound):
        return NotFoundError("Resource not found")
    if isinstance(exc, IntegrityError) and _is_unique_violation(exc):
        return DuplicateResourceError("Resource already exists")
    return DatabaseError(str(exc))
