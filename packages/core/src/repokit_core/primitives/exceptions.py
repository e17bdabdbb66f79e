"""Error kinds surfaced by repokit."""

from __future__ import annotations


class RepoKitError(Exception):
    """Root exception for the entire repokit toolkit."""


class NotFoundError(RepoKitError):
    """Raised when an entity or resource is not found."""


class EntityNotFoundError(NotFoundError):
    """Raised when an operation requires an identity that is not stored."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} not found")


class InvalidArgumentError(RepoKitError):
    """Raised for malformed specifications or unusable mutation arguments."""


class InfrastructureError(RepoKitError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Base class for all persistence-related errors."""


class StoreError(PersistenceError):
    """The underlying store could not complete an operation.

    ``retryable`` tells callers whether the same call may succeed when
    repeated.  The store-level exception is kept as ``__cause__``.
    """

    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        entity_type: str | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.operation = operation
        self.entity_type = entity_type
        self.batch_size = batch_size
        if batch_size is not None:
            message = f"{message} (batch of {batch_size} was not committed)"
        super().__init__(message)


class TransientStoreError(StoreError):
    """Connectivity, timeout or lock contention; safe for the caller to retry."""

    retryable = True


class PermanentStoreError(StoreError):
    """Constraint violation or other failure that will not heal on retry."""

    retryable = False
