"""Store handle protocols consumed by the generic repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from contextlib import AbstractAsyncContextManager

    from .query import IQuery

T = TypeVar("T")


@runtime_checkable
class IEntitySet(Protocol[T]):
    """
    Collection of one entity type inside an open store session.

    Mutations are *staged*; nothing is durable until
    :meth:`IStoreSession.commit` returns.
    """

    def query(self) -> IQuery[T]:
        """Return the base (unfiltered) query for this entity type."""
        ...

    async def find(self, entity_id: int) -> T | None: ...

    async def to_list(self, query: IQuery[T]) -> list[T]: ...

    async def count(self, query: IQuery[T]) -> int: ...

    async def add(self, entity: T) -> None: ...

    async def add_range(self, entities: Sequence[T]) -> None: ...

    async def mark_modified(self, entity: T) -> None:
        """Stage a full update; raise ``EntityNotFoundError`` if not stored."""
        ...

    async def mark_modified_range(self, entities: Sequence[T]) -> None: ...

    async def remove(self, entity: T) -> None:
        """Stage a delete; raise ``EntityNotFoundError`` if not stored."""
        ...

    async def remove_range(self, entities: Sequence[T]) -> None: ...


@runtime_checkable
class IStoreSession(Protocol):
    """One unit of store work.  Leaving it without ``commit`` discards."""

    def entity_set(self, entity_cls: type[T]) -> IEntitySet[T]: ...

    async def commit(self) -> None:
        """Durably apply every staged change, all or nothing."""
        ...


@runtime_checkable
class IStore(Protocol):
    """Handle on the underlying storage engine."""

    def session(self) -> AbstractAsyncContextManager[IStoreSession]:
        """Open a session: ``async with store.session() as session: ...``"""
        ...
