"""Primitives: error kinds."""

from __future__ import annotations

from .exceptions import (
    EntityNotFoundError,
    InfrastructureError,
    InvalidArgumentError,
    NotFoundError,
    PermanentStoreError,
    PersistenceError,
    RepoKitError,
    StoreError,
    TransientStoreError,
)

__all__ = [
    "RepoKitError",
    "NotFoundError",
    "EntityNotFoundError",
    "InvalidArgumentError",
    "InfrastructureError",
    "PersistenceError",
    "StoreError",
    "TransientStoreError",
    "PermanentStoreError",
]
