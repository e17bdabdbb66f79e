"""Criteria and query-specification contracts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

T = TypeVar("T", contravariant=True)


@runtime_checkable
class ICriteria(Protocol, Generic[T]):
    """
    A translatable predicate over one entity type.

    Criteria are a filter-expression tree rather than opaque callables, so
    that every store can interpret them: in-memory stores call
    ``is_satisfied_by``, query-language stores translate ``to_dict()``.
    """

    def is_satisfied_by(self, candidate: T) -> bool:
        """Check the predicate against a materialized entity."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """
        Return the JSON-compatible AST of the predicate.
        Used by stores that compile criteria into their own query language.
        """
        ...


@runtime_checkable
class ISpecification(Protocol, Generic[T]):
    """
    Declarative description of a query over one entity type.

    Pure data: filtering, eager loading, ordering and paging.  Nothing here
    touches a store, so one instance can be reused across calls.
    """

    @property
    def criteria(self) -> ICriteria[T] | None: ...

    @property
    def includes(self) -> Sequence[str]: ...

    @property
    def include_strings(self) -> Sequence[str]: ...

    @property
    def order_by(self) -> str | None: ...

    @property
    def order_by_descending(self) -> str | None: ...

    @property
    def skip(self) -> int: ...

    @property
    def take(self) -> int: ...

    @property
    def is_paging_enabled(self) -> bool: ...
