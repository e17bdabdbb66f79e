"""
SQLAlchemy (async) implementation of the store-handle protocols.

Entities are SQLAlchemy declarative models exposing an integer ``id``
primary key.  One :class:`SQLAlchemyStoreSession` wraps one
``AsyncSession``; staged changes become a single transaction on
``commit``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from repokit_core.primitives.exceptions import EntityNotFoundError

from .exceptions import SessionManagementError, translating_errors
from .query import SQLAlchemyQuery

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from sqlalchemy.ext.asyncio import AsyncEngine

    from .specifications.strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("repokit.store.sqlalchemy")

T = TypeVar("T")


class SQLAlchemyStore:
    """
    ``IStore`` backed by an ``async_sessionmaker``.

    Two construction styles::

        store = SQLAlchemyStore(async_sessionmaker(engine, expire_on_commit=False))
        store = SQLAlchemyStore.from_url("sqlite+aiosqlite:///:memory:")

    Entities returned by the repository outlive their session, so the
    factory must not expire instances on commit.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        if getattr(session_factory, "kw", {}).get("expire_on_commit", True):
            logger.warning(
                "Session factory expires instances on commit; entities returned "
                "after add/update cannot be read outside their session"
            )
        self._session_factory = session_factory
        self._registry = registry
        self._engine = engine

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
        **engine_kwargs: Any,
    ) -> SQLAlchemyStore:
        """Create an engine for *url* (extra kwargs go to ``create_async_engine``)."""
        engine = create_async_engine(url, **engine_kwargs)
        factory = async_sessionmaker(engine, expire_on_commit=False)
        return cls(factory, registry=registry, engine=engine)

    @property
    def engine(self) -> AsyncEngine | None:
        """The engine created by :meth:`from_url`, if any."""
        return self._engine

    def session(self) -> SQLAlchemyStoreSession:
        return SQLAlchemyStoreSession(self._session_factory, registry=self._registry)

    async def dispose(self) -> None:
        """Dispose the engine created by :meth:`from_url`."""
        if self._engine is not None:
            await self._engine.dispose()


class SQLAlchemyStoreSession:
    """
    One ``AsyncSession`` for the duration of an ``async with`` block.

    ``commit`` flushes and commits every staged change as one transaction.
    Leaving the block without committing (or by an exception, including
    cancellation) rolls back and closes the session.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._registry = registry
        self._session: AsyncSession | None = None
        self._staged: list[tuple[str, str]] = []

    @property
    def session(self) -> AsyncSession:
        """The active ``AsyncSession``.  Raises outside ``async with``."""
        if self._session is None:
            raise SessionManagementError(
                "Store session is not open; use 'async with store.session()'"
            )
        return self._session

    async def __aenter__(self) -> SQLAlchemyStoreSession:
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        session, self._session = self._session, None
        if session is None:
            return
        if self._staged:
            logger.debug("Discarding %d uncommitted change(s)", len(self._staged))
            self._staged.clear()
        # close() rolls back without expiring loaded instances.
        await session.close()

    def entity_set(self, entity_cls: type[T]) -> SQLAlchemyEntitySet[T]:
        return SQLAlchemyEntitySet(self, entity_cls, registry=self._registry)

    # -- staging ------------------------------------------------------------

    def stage(self, operation: str, entity_type: str) -> None:
        self._staged.append((operation, entity_type))

    # -- commit -------------------------------------------------------------

    async def commit(self) -> None:
        staged, self._staged = self._staged, []
        operations = {op for op, _ in staged}
        types = {name for _, name in staged}
        operation = operations.pop() if len(operations) == 1 else "commit"
        entity_type = types.pop() if len(types) == 1 else None
        with translating_errors(
            operation,
            entity_type=entity_type,
            batch_size=len(staged) if len(staged) > 1 else None,
        ):
            await self.session.commit()
        logger.debug("Committed %d change(s)", len(staged))


class SQLAlchemyEntitySet(Generic[T]):
    """``IEntitySet[T]`` over one mapped class inside a store session."""

    def __init__(
        self,
        session: SQLAlchemyStoreSession,
        entity_cls: type[T],
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self._session = session
        self.entity_cls = entity_cls
        self._registry = registry

    @property
    def _name(self) -> str:
        return self.entity_cls.__name__

    def query(self) -> SQLAlchemyQuery[T]:
        return SQLAlchemyQuery(self.entity_cls, registry=self._registry)

    async def find(self, entity_id: int) -> T | None:
        with translating_errors("get", entity_type=self._name):
            return await self._session.session.get(self.entity_cls, entity_id)

    async def to_list(self, query: SQLAlchemyQuery[T]) -> list[T]:
        with translating_errors("list", entity_type=self._name):
            result = await self._session.session.execute(query.statement)
            return list(result.scalars().all())

    async def count(self, query: SQLAlchemyQuery[T]) -> int:
        with translating_errors("count", entity_type=self._name):
            total = await self._session.session.scalar(query.count_statement())
        return int(total or 0)

    async def add(self, entity: T) -> None:
        self._session.session.add(entity)
        self._session.stage("add", self._name)

    async def add_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.add(entity)

    async def mark_modified(self, entity: T) -> None:
        await self._require_stored(entity, "update")
        with translating_errors("update", entity_type=self._name):
            await self._session.session.merge(entity)
        self._session.stage("update", self._name)

    async def mark_modified_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.mark_modified(entity)

    async def remove(self, entity: T) -> None:
        stored = await self._require_stored(entity, "delete")
        with translating_errors("delete", entity_type=self._name):
            await self._session.session.delete(stored)
        self._session.stage("delete", self._name)

    async def remove_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.remove(entity)

    async def _require_stored(self, entity: Any, operation: str) -> Any:
        entity_id = getattr(entity, "id", None)
        with translating_errors(operation, entity_type=self._name):
            stored = await self._session.session.get(self.entity_cls, entity_id)
        # Already staged for deletion in this session counts as gone.
        if stored is None or stored in self._session.session.deleted:
            raise EntityNotFoundError(self._name, entity_id)
        return stored
