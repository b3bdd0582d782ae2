"""Domain exception classes for business logic errors."""


class DomainError(Exception):
    """Base class for all domain-specific errors."""

    pass


class ResourceNotFoundError(DomainError):
    """Raised when a requested resource cannot be found."""

    pass


class ResourceExistsError(DomainError):
    """Raised when attempting to create a resource that already exists."""

    pass


class ValidationError(DomainError):
    """Raised when data validation fails."""

    pass


class PermissionDeniedError(DomainError):
    """Raised when the caller may not see the requested content."""

    pass


class DocumentNotFoundError(ResourceNotFoundError):
    """Raised when a document cannot be found."""

    pass


class PageNotFoundError(ResourceNotFoundError):
    """Raised when a page cannot be found."""

    pass


class BlockNotFoundError(ResourceNotFoundError):
    """Raised when a block cannot be found."""

    pass


class PersistenceError(DomainError):
    """Raised by a document store when a write or read could not be applied."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
