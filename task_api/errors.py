"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_INPUT = "INVALID_INPUT"
DATABASE_ERROR = "DATABASE_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create or update a resource that would violate a uniqueness constraint."""

    pass


class DatabaseError(DomainError):
    """Raised for storage failures that are neither a missing row nor a uniqueness conflict."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. empty title)."""

    pass


class InvalidInputError(DomainError):
    """Raised when a request cannot be decoded (malformed JSON, unparsable identifier)."""

    pass


class InternalError(DomainError):
    """Raised for unexpected failures that fit no other kind."""

    pass
