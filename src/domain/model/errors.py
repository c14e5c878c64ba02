"""Domain-level exceptions.

Services raise these errors to express business rule violations.
The use case boundary catches them and turns them into result envelopes;
route handlers map the envelope codes to HTTP status codes.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes carried in result envelopes."""
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    USER_NOT_FOUND = 'USER_NOT_FOUND'
    EMAIL_CONFLICT = 'EMAIL_CONFLICT'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


class DomainError(Exception):
    """Base class for all domain errors."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""
    code = ErrorCode.VALIDATION_ERROR


class NotFoundError(DomainError):
    """Requested entity does not exist."""
    code = ErrorCode.USER_NOT_FOUND


class ConflictError(DomainError):
    """Entity with the same unique key already exists."""
    code = ErrorCode.EMAIL_CONFLICT


class InternalError(DomainError):
    """Unexpected failure, usually from the backing store."""
    code = ErrorCode.INTERNAL_ERROR
