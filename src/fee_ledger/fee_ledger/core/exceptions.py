class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a fee record is mutated before it was initialized."""


class AlreadyExistsError(DomainError):
    """Raised when initializing a fee record for a student that already has one."""


class StoreError(DomainError):
    """Raised when the underlying storage call fails."""
