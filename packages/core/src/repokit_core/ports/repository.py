"""IRepository: generic repository protocol."""

from __future__ import annotations

import builtins
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..domain.specification import ISpecification

T = TypeVar("T")


@runtime_checkable
class IRepository(Protocol[T]):
    """
    Persistence-ignorant CRUD and query surface over one entity type.

    Query methods accept an :class:`ISpecification` describing filtering,
    eager loading, ordering and paging::

        spec = Specification(criteria=active, order_by="name").with_paging(0, 20)
        page = await repo.list(spec)
        total = await repo.count(spec)  # ignores ordering and paging

    Mutations commit before returning.  ``update`` and ``delete`` of an
    identity that is not stored raise ``EntityNotFoundError``.
    """

    async def get_by_id(self, entity_id: int) -> T | None: ...

    async def get_single_by_spec(self, spec: ISpecification[T]) -> T | None: ...

    async def list_all(self) -> builtins.list[T]: ...

    async def list(self, spec: ISpecification[T]) -> builtins.list[T]: ...

    async def count(self, spec: ISpecification[T]) -> int: ...

    async def add(self, entity: T) -> T: ...

    async def add_many(self, entities: Sequence[T]) -> builtins.list[T]: ...

    async def update(self, entity: T) -> None: ...

    async def update_many(self, entities: Sequence[T]) -> None: ...

    async def delete(self, entity: T) -> None: ...

    async def delete_many(self, entities: Sequence[T]) -> None: ...
