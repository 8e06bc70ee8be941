from typing import Optional, Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str = "", errors: Optional[Sequence[dict]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class AuthorizationError(DomainError):
    """Raised when a user lacks roster membership, ownership or role."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when an activity, record or report does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be broken (double check-in, ...)."""

    status_code = 409


class InvalidStateError(DomainError):
    """Raised when the activity or record is in a state that forbids the action."""

    status_code = 409


class OutOfWindowError(DomainError):
    """Raised when the time policy rejects a check-in."""

    status_code = 422

    TOO_EARLY = "too early"
    TOO_LATE = "too late"

    def __init__(self, message: str = "", reason: str = TOO_EARLY):
        super().__init__(message)
        self.reason = reason
