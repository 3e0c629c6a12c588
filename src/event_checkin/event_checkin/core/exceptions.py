class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateCheckInError(ValidationError):
    """Raised when the same (name, type) pair checks in twice."""


class InvalidTypeError(ValidationError):
    """Raised when a check-in type is neither member nor guest."""


class MalformedInputError(ValidationError):
    """Raised when a QR or check-in payload cannot be decoded."""


class NotFoundError(DomainError, LookupError):
    """Raised when a referenced record, event or current event does not exist."""


class RecordNotFoundError(NotFoundError, IndexError):
    """Raised when a check-in log index is out of range."""
