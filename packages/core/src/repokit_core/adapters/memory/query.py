"""MemoryQuery: immutable recorded query over in-process entities."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ...primitives.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ...domain.specification import ICriteria

T = TypeVar("T")

_MISSING = object()


@dataclass(frozen=True)
class MemoryQuery(Generic[T]):
    """
    ``IQuery[T]`` for the in-memory store.

    Building the query only records steps; :meth:`apply` runs them over a
    snapshot of stored entities.  Criteria are evaluated with
    ``is_satisfied_by``.  Repeated ``order_by`` calls add secondary keys.
    ``skip`` / ``take`` describe one result window applied last.
    """

    entity_cls: type[T]
    criteria: tuple[ICriteria[T], ...] = ()
    includes: tuple[str, ...] = ()
    ordering: tuple[tuple[str, bool], ...] = ()
    offset: int = 0
    limit: int | None = None

    # -- IQuery ---------------------------------------------------------------

    def where(self, criteria: ICriteria[T]) -> MemoryQuery[T]:
        return replace(self, criteria=(*self.criteria, criteria))

    def include(self, path: str) -> MemoryQuery[T]:
        # Navigation properties are already materialized in memory; the path
        # is recorded and checked at execution time.
        return replace(self, includes=(*self.includes, path))

    def order_by(self, key: str, *, descending: bool = False) -> MemoryQuery[T]:
        return replace(self, ordering=(*self.ordering, (key, descending)))

    def skip(self, count: int) -> MemoryQuery[T]:
        if count < 0:
            raise InvalidArgumentError(f"skip must be >= 0, got {count}")
        return replace(self, offset=count)

    def take(self, count: int) -> MemoryQuery[T]:
        return replace(self, limit=max(count, 0))

    # -- execution ------------------------------------------------------------

    def apply(self, entities: Iterable[T]) -> list[T]:
        """Run the recorded pipeline: filter, check includes, order, window."""
        items = [
            entity
            for entity in entities
            if all(c.is_satisfied_by(entity) for c in self.criteria)
        ]

        for path in self.includes:
            for entity in items:
                resolve_path(entity, path)

        # Stable sorts applied from the least to the most significant key.
        for key, descending in reversed(self.ordering):
            items.sort(key=lambda e, k=key: _sort_key(e, k), reverse=descending)

        items = items[self.offset :]
        if self.limit is not None:
            items = items[: self.limit]
        return items


def resolve_path(obj: Any, path: str) -> Any:
    """
    Resolve a dot-separated attribute path, failing on unknown segments.

    Lists are traversed implicitly (``lines.product`` on a list of lines
    yields a list of products); ``None`` short-circuits.
    """
    return _resolve(obj, path.split("."), path)


def _resolve(obj: Any, parts: list[str], path: str) -> Any:
    if not parts or obj is None:
        return obj
    if isinstance(obj, list | tuple):
        return [_resolve(item, parts, path) for item in obj]
    part = parts[0]
    if isinstance(obj, dict):
        value = obj.get(part, _MISSING)
    else:
        value = getattr(obj, part, _MISSING)
    if value is _MISSING:
        raise InvalidArgumentError(
            f"'{type(obj).__name__}' has no attribute '{part}' (path '{path}')"
        )
    return _resolve(value, parts[1:], path)


def _sort_key(entity: Any, key: str) -> tuple[bool, Any]:
    # None sorts first ascending and last descending, like SQL NULLs in SQLite.
    value = resolve_path(entity, key)
    return (value is not None, value)
