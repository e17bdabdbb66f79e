"""SQLAlchemy (async) store adapter for repokit."""

from __future__ import annotations

from .exceptions import (
    SessionManagementError,
    SQLAlchemyPersistenceError,
    is_transient,
    translate_store_error,
    translating_errors,
)
from .query import SQLAlchemyQuery
from .specifications import (
    DEFAULT_SQLA_REGISTRY,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
    build_default_sqla_registry,
    build_sqla_filter,
)
from .store import SQLAlchemyEntitySet, SQLAlchemyStore, SQLAlchemyStoreSession

__all__ = [
    # Store
    "SQLAlchemyStore",
    "SQLAlchemyStoreSession",
    "SQLAlchemyEntitySet",
    "SQLAlchemyQuery",
    # Specifications / Compiler
    "build_sqla_filter",
    "build_default_sqla_registry",
    "DEFAULT_SQLA_REGISTRY",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    # Exceptions
    "SQLAlchemyPersistenceError",
    "SessionManagementError",
    "is_transient",
    "translate_store_error",
    "translating_errors",
]
