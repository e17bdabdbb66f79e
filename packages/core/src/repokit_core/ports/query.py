"""IQuery: lazy, composable query description protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from ..domain.specification import ICriteria

T = TypeVar("T")


@runtime_checkable
class IQuery(Protocol[T]):
    """
    Store-specific query under construction.

    Every method returns a *new* query and never touches the store;
    execution belongs to :class:`~repokit_core.ports.store.IEntitySet`.
    This is the only surface the ``SpecificationEvaluator`` relies on.
    """

    def where(self, criteria: ICriteria[T]) -> IQuery[T]:
        """Restrict the query to entities satisfying *criteria*."""
        ...

    def include(self, path: str) -> IQuery[T]:
        """Eagerly materialize the navigation property (or dotted path)."""
        ...

    def order_by(self, key: str, *, descending: bool = False) -> IQuery[T]:
        """Order by the attribute named *key*."""
        ...

    def skip(self, count: int) -> IQuery[T]:
        """Drop the first *count* rows of the ordered, filtered sequence."""
        ...

    def take(self, count: int) -> IQuery[T]:
        """Keep at most *count* rows; ``0`` yields an empty result."""
        ...
