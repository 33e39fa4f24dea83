class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class InconsistentStateError(NotFoundError):
    """Raised when stored data references a record that no longer exists.

    Example: an employee still points at a deleted rule template.
    """


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
