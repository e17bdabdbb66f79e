"""Repository: generic CRUD surface over any store handle."""

from __future__ import annotations

import builtins
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .evaluator import SpecificationEvaluator
from .ports.repository import IRepository
from .primitives.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .domain.specification import ISpecification
    from .ports.store import IStore

logger = logging.getLogger("repokit.repository")

T = TypeVar("T")


class Repository(IRepository[T], Generic[T]):
    """
    Implementation of ``IRepository[T]`` on top of an :class:`IStore`.

    The repository holds nothing but the entity class and the store
    handle.  Each call opens its own store session, so one instance may be
    shared by concurrent callers; isolation between them is the store's
    business.

    Filtering, eager loading, ordering and paging are delegated to
    :class:`SpecificationEvaluator`; execution and persistence to the
    store's entity set::

        repo = Repository(Customer, InMemoryStore())
        ada = await repo.add(Customer(name="Ada"))
        found = await repo.get_by_id(ada.id)

    Store failures propagate as ``StoreError`` subclasses; nothing is
    retried here.
    """

    def __init__(self, entity_cls: type[T], store: IStore) -> None:
        self.entity_cls = entity_cls
        self._store = store

    # -- queries ------------------------------------------------------------

    async def get_by_id(self, entity_id: int) -> T | None:
        async with self._store.session() as session:
            return await session.entity_set(self.entity_cls).find(entity_id)

    async def get_single_by_spec(self, spec: ISpecification[T]) -> T | None:
        """Return the first matching entity in result order, or ``None``."""
        items = await self.list(spec)
        return items[0] if items else None

    async def list_all(self) -> builtins.list[T]:
        async with self._store.session() as session:
            entities = session.entity_set(self.entity_cls)
            return await entities.to_list(entities.query().order_by("id"))

    async def list(self, spec: ISpecification[T]) -> builtins.list[T]:
        async with self._store.session() as session:
            entities = session.entity_set(self.entity_cls)
            query = SpecificationEvaluator.get_query(entities.query(), spec)
            return await entities.to_list(query)

    async def count(self, spec: ISpecification[T]) -> int:
        async with self._store.session() as session:
            entities = session.entity_set(self.entity_cls)
            query = SpecificationEvaluator.get_count_query(entities.query(), spec)
            return await entities.count(query)

    # -- mutations ----------------------------------------------------------

    async def add(self, entity: T) -> T:
        self._require_entity(entity)
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).add(entity)
            await session.commit()
        logger.debug("Added %s id=%s", self._name, _identity(entity))
        return entity

    async def add_many(self, entities: Sequence[T]) -> builtins.list[T]:
        batch = self._require_batch(entities)
        if not batch:
            return []
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).add_range(batch)
            await session.commit()
        logger.debug("Added %d %s entities", len(batch), self._name)
        return batch

    async def update(self, entity: T) -> None:
        self._require_identity(entity)
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).mark_modified(entity)
            await session.commit()
        logger.debug("Updated %s id=%s", self._name, _identity(entity))

    async def update_many(self, entities: Sequence[T]) -> None:
        batch = self._require_batch(entities, with_identity=True)
        if not batch:
            return
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).mark_modified_range(batch)
            await session.commit()
        logger.debug("Updated %d %s entities", len(batch), self._name)

    async def delete(self, entity: T) -> None:
        self._require_identity(entity)
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).remove(entity)
            await session.commit()
        logger.debug("Deleted %s id=%s", self._name, _identity(entity))

    async def delete_many(self, entities: Sequence[T]) -> None:
        batch = self._require_batch(entities, with_identity=True)
        if not batch:
            return
        async with self._store.session() as session:
            await session.entity_set(self.entity_cls).remove_range(batch)
            await session.commit()
        logger.debug("Deleted %d %s entities", len(batch), self._name)

    # -- argument checks ----------------------------------------------------

    @property
    def _name(self) -> str:
        return self.entity_cls.__name__

    def _require_entity(self, entity: Any) -> None:
        if entity is None:
            raise InvalidArgumentError(f"{self._name} entity must not be None")
        if not hasattr(entity, "id"):
            raise InvalidArgumentError(
                f"{type(entity).__name__} does not expose an 'id' attribute"
            )

    def _require_identity(self, entity: Any) -> None:
        self._require_entity(entity)
        if _identity(entity) is None:
            raise InvalidArgumentError(
                f"{self._name} has no identity; it was never persisted"
            )

    def _require_batch(
        self, entities: Sequence[T] | None, *, with_identity: bool = False
    ) -> builtins.list[T]:
        if entities is None:
            raise InvalidArgumentError(f"{self._name} batch must not be None")
        batch = builtins.list(entities)
        check = self._require_identity if with_identity else self._require_entity
        for entity in batch:
            check(entity)
        return batch


def _identity(entity: Any) -> Any:
    return getattr(entity, "id", None)
