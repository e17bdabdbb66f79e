from typing import Any, Generic, TypeVar

from repokit_core.domain.specification import ICriteria

T = TypeVar("T", contravariant=True)


class BaseCriteria(Generic[T], ICriteria[T]):
    """Base class for criteria with logic operator support."""

    def __and__(self, other: ICriteria[T]) -> "AndCriteria[T]":
        return AndCriteria(self, other)

    def __or__(self, other: ICriteria[T]) -> "OrCriteria[T]":
        return OrCriteria(self, other)

    def __invert__(self) -> "NotCriteria[T]":
        return NotCriteria(self)

    def merge(self, other: ICriteria[T]) -> "AndCriteria[T]":
        """Merge with other criteria using logical AND."""
        return AndCriteria(self, other)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_dict()!r})"


class AndCriteria(BaseCriteria[T]):
    """Logical AND composite."""

    def __init__(self, *criteria: ICriteria[T]) -> None:
        self.criteria = criteria

    def is_satisfied_by(self, candidate: T) -> bool:
        return all(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "and", "conditions": [c.to_dict() for c in self.criteria]}


class OrCriteria(BaseCriteria[T]):
    """Logical OR composite."""

    def __init__(self, *criteria: ICriteria[T]) -> None:
        self.criteria = criteria

    def is_satisfied_by(self, candidate: T) -> bool:
        return any(c.is_satisfied_by(candidate) for c in self.criteria)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "or", "conditions": [c.to_dict() for c in self.criteria]}


class NotCriteria(BaseCriteria[T]):
    """Logical NOT composite."""

    def __init__(self, criteria: ICriteria[T]) -> None:
        self.inner = criteria

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.inner.is_satisfied_by(candidate)

    def to_dict(self) -> dict[str, Any]:
        return {"op": "not", "conditions": [self.inner.to_dict()]}
