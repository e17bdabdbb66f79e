"""InMemoryStore: dict-backed store handle for tests and prototyping."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar

from pydantic import BaseModel

from ...primitives.exceptions import EntityNotFoundError, PermanentStoreError
from .query import MemoryQuery

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

logger = logging.getLogger("repokit.store.memory")

T = TypeVar("T")

ChangeKind = Literal["add", "update", "remove"]


@dataclass(frozen=True)
class _Change:
    kind: ChangeKind
    entity_cls: type[Any]
    entity: Any


class InMemoryStore:
    """
    In-memory implementation of ``IStore``.

    Keeps one ``{id: entity}`` table per entity type plus an integer
    sequence per type.  Stored entities are deep copies, so mutating an
    object returned by a query changes nothing until it is passed to
    ``update``.
    """

    def __init__(self) -> None:
        self._tables: dict[type[Any], dict[int, Any]] = {}
        self._sequences: dict[type[Any], int] = {}

    def session(self) -> InMemoryStoreSession:
        return InMemoryStoreSession(self)

    def table(self, entity_cls: type[Any]) -> dict[int, Any]:
        return self._tables.setdefault(entity_cls, {})

    def next_id(self, entity_cls: type[Any]) -> int:
        self._sequences[entity_cls] = self._sequences.get(entity_cls, 0) + 1
        return self._sequences[entity_cls]

    def reserve_id(self, entity_cls: type[Any], entity_id: int) -> None:
        """Keep the sequence ahead of explicitly supplied identities."""
        if entity_id > self._sequences.get(entity_cls, 0):
            self._sequences[entity_cls] = entity_id

    # ── Test helpers ─────────────────────────────────────────────

    def clear(self) -> None:
        self._tables.clear()
        self._sequences.clear()

    def size(self, entity_cls: type[Any]) -> int:
        return len(self._tables.get(entity_cls, {}))


class InMemoryStoreSession:
    """
    One unit of work against an :class:`InMemoryStore`.

    Changes are staged in order.  ``commit`` validates the whole batch
    against the live tables first and only then applies it, without
    yielding to the event loop, so a batch lands completely or not at all.
    Leaving the ``async with`` block without committing discards the batch.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self._pending: list[_Change] = []

    async def __aenter__(self) -> InMemoryStoreSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._pending:
            logger.debug("Discarding %d uncommitted change(s)", len(self._pending))
        self._pending.clear()

    def entity_set(self, entity_cls: type[T]) -> InMemoryEntitySet[T]:
        return InMemoryEntitySet(self, entity_cls)

    # -- staging ------------------------------------------------------------

    @property
    def store(self) -> InMemoryStore:
        return self._store

    def stage(self, kind: ChangeKind, entity_cls: type[Any], entity: Any) -> None:
        self._pending.append(_Change(kind, entity_cls, entity))

    def staged_ids(self, entity_cls: type[Any]) -> set[int]:
        """Identities present once the changes staged so far were applied."""
        present = set(self._store.table(entity_cls))
        for change in self._pending:
            if change.entity_cls is not entity_cls or change.entity.id is None:
                continue
            if change.kind == "add":
                present.add(change.entity.id)
            elif change.kind == "remove":
                present.discard(change.entity.id)
        return present

    # -- commit -------------------------------------------------------------

    async def commit(self) -> None:
        pending, self._pending = self._pending, []
        if not pending:
            return
        self._validate(pending)
        for change in pending:
            if change.kind == "add" and change.entity.id is not None:
                self._store.reserve_id(change.entity_cls, change.entity.id)
        for change in pending:
            self._apply(change)
        logger.debug("Committed %d change(s)", len(pending))

    def _validate(self, pending: list[_Change]) -> None:
        present: dict[type[Any], set[int]] = {}
        for change in pending:
            ids = present.setdefault(
                change.entity_cls, set(self._store.table(change.entity_cls))
            )
            entity_id = change.entity.id
            name = change.entity_cls.__name__
            if change.kind == "add":
                if entity_id is None:
                    continue
                if entity_id in ids:
                    raise PermanentStoreError(
                        f"Duplicate identity {entity_id!r} for {name}",
                        operation="add",
                        entity_type=name,
                        batch_size=len(pending) if len(pending) > 1 else None,
                    )
                ids.add(entity_id)
            elif entity_id not in ids:
                raise EntityNotFoundError(name, entity_id)
            elif change.kind == "remove":
                ids.discard(entity_id)

    def _apply(self, change: _Change) -> None:
        table = self._store.table(change.entity_cls)
        entity = change.entity
        if change.kind == "remove":
            del table[entity.id]
            return
        if change.kind == "add" and entity.id is None:
            object.__setattr__(entity, "id", self._store.next_id(change.entity_cls))
            if isinstance(entity, BaseModel):
                entity.__pydantic_fields_set__.add("id")
        table[entity.id] = copy.deepcopy(entity)


class InMemoryEntitySet(Generic[T]):
    """``IEntitySet[T]`` view of one table inside an :class:`InMemoryStoreSession`."""

    def __init__(self, session: InMemoryStoreSession, entity_cls: type[T]) -> None:
        self._session = session
        self.entity_cls = entity_cls

    @property
    def _table(self) -> dict[int, Any]:
        return self._session.store.table(self.entity_cls)

    def query(self) -> MemoryQuery[T]:
        return MemoryQuery(self.entity_cls)

    async def find(self, entity_id: int) -> T | None:
        stored = self._table.get(entity_id)
        return copy.deepcopy(stored) if stored is not None else None

    async def to_list(self, query: MemoryQuery[T]) -> list[T]:
        return [copy.deepcopy(e) for e in query.apply(list(self._table.values()))]

    async def count(self, query: MemoryQuery[T]) -> int:
        return len(query.apply(list(self._table.values())))

    async def add(self, entity: T) -> None:
        self._session.stage("add", self.entity_cls, entity)

    async def add_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.add(entity)

    async def mark_modified(self, entity: T) -> None:
        self._require_stored(entity)
        self._session.stage("update", self.entity_cls, entity)

    async def mark_modified_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.mark_modified(entity)

    async def remove(self, entity: T) -> None:
        self._require_stored(entity)
        self._session.stage("remove", self.entity_cls, entity)

    async def remove_range(self, entities: Sequence[T]) -> None:
        for entity in entities:
            await self.remove(entity)

    def _require_stored(self, entity: Any) -> None:
        if entity.id not in self._session.staged_ids(self.entity_cls):
            raise EntityNotFoundError(self.entity_cls.__name__, entity.id)
