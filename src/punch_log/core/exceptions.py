class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StorageIOError(DomainError):
    """Raised when the durable medium fails to read or write."""


class NotFound(DomainError):
    """Raised when an update or delete references an unknown record id."""


class InvalidTransition(DomainError):
    """Raised on punch in while working, or punch out while idle."""


class NoActiveSession(DomainError):
    """Raised when the session state and the record store disagree."""


class InvalidTimeRange(DomainError):
    """Raised when an edit puts punch out at or before punch in."""
