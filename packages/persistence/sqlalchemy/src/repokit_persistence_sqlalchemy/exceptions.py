"""Exceptions for the SQLAlchemy persistence layer and store-error translation."""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from sqlalchemy import exc as sa_exc

from repokit_core.primitives.exceptions import (
    PermanentStoreError,
    PersistenceError,
    StoreError,
    TransientStoreError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger("repokit.store.sqlalchemy")

# Errors raised below SQLAlchemy (driver sockets, asyncio timeouts) that reach
# us unwrapped.
_DRIVER_ERRORS: tuple[type[BaseException], ...] = (ConnectionError, TimeoutError)

_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    sa_exc.DisconnectionError,
    *_DRIVER_ERRORS,
)


class SQLAlchemyPersistenceError(PersistenceError):
    """Base exception for all SQLAlchemy-specific persistence errors."""


class SessionManagementError(SQLAlchemyPersistenceError):
    """Raised when a store session is used outside its ``async with`` block."""


def is_transient(error: BaseException) -> bool:
    """Whether repeating the failed call may succeed."""
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return True
    return isinstance(error, _TRANSIENT_ERRORS)


def translate_store_error(
    error: BaseException,
    *,
    operation: str,
    entity_type: str | None = None,
    batch_size: int | None = None,
) -> StoreError:
    """
    Map a SQLAlchemy / driver exception onto the ``StoreError`` hierarchy.

    Connectivity, timeouts, invalidated connections and operational errors
    (SQLite ``database is locked`` among them) become
    :class:`TransientStoreError`; integrity, programming and data errors
    become :class:`PermanentStoreError`.  The caller re-raises the result
    with ``raise ... from error`` so the original stays as ``__cause__``.
    """
    if isinstance(error, StoreError):
        return error

    kind = TransientStoreError if is_transient(error) else PermanentStoreError
    target = entity_type or "store"
    logger.warning(
        "%s on %s failed (%s): %s",
        operation,
        target,
        kind.__name__,
        error,
    )
    message = f"{operation} on {target} failed: {type(error).__name__}"
    detail = _first_line(error)
    if detail:
        message = f"{message}: {detail}"
    return kind(
        message,
        operation=operation,
        entity_type=entity_type,
        batch_size=batch_size,
    )


@contextlib.contextmanager
def translating_errors(
    operation: str,
    *,
    entity_type: str | None = None,
    batch_size: int | None = None,
) -> Iterator[None]:
    """Translate store failures raised inside the block; others pass through."""
    try:
        yield
    except (sa_exc.SQLAlchemyError, *_DRIVER_ERRORS) as error:
        raise translate_store_error(
            error,
            operation=operation,
            entity_type=entity_type,
            batch_size=batch_size,
        ) from error


def _first_line(error: BaseException) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else ""


__all__: list[str] = [
    "SQLAlchemyPersistenceError",
    "SessionManagementError",
    "is_transient",
    "translate_store_error",
    "translating_errors",
]
