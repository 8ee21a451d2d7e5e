"""Domain exception classes for business logic errors."""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class CopyNotFoundError(ResourceNotFoundError):
    """Raised when a book copy cannot be found."""

    def __init__(self, message: str = "Book copy not found"):
        super().__init__(message)
