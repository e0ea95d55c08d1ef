class DomainError(Exception):
    """Base class for domain-level exceptions."""


class ValidationError(DomainError):
    """Required content was missing; the caller can correct it."""


class Unauthorized(DomainError):
    """Scoped mutation matched no row: not the owner, or no such record."""


class PostNotFound(DomainError):
    pass


class OperationFailed(DomainError):
    """The store faulted while handling a command."""
