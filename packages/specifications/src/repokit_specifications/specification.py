"""
Specification: the immutable description of one query.

The criteria tree says *which* entities match; the remaining fields say how
the result is shaped (eager loading, ordering, paging).  A Specification
never touches a store, so the same instance can be passed to any number of
repositories of the same entity type.

Named query intents are plain functions returning a populated value::

    def active_orders_for(customer_id: int) -> Specification[Order]:
        return (
            SpecificationBuilder()
            .where("customer_id", "=", customer_id)
            .where("status", "=", "active")
            .include("lines")
            .order_by_descending("placed_at")
            .build()
        )
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .ast import CriteriaFactory
from .base import AndCriteria
from .exceptions import ValidationError
from .operators_memory import build_default_registry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repokit_core.domain.specification import ICriteria

    from .strategy import MemoryOperatorRegistry

T = TypeVar("T")


@dataclass(frozen=True)
class Specification(Generic[T]):
    """
    Immutable query description satisfying ``ISpecification``.

    Attributes:
        criteria: Filter tree; ``None`` matches every entity.
        includes: Single-hop navigation properties to load eagerly.
        include_strings: Dotted navigation paths (``"lines.product"``).
        order_by: Attribute to sort ascending.  Wins over
            ``order_by_descending`` when both are set.
        order_by_descending: Attribute to sort descending.
        skip: Rows to drop before the page starts.
        take: Page size.  ``0`` or less yields an empty page.
        is_paging_enabled: Paging is applied only when this is ``True``.
    """

    criteria: ICriteria[T] | None = None
    includes: tuple[str, ...] = field(default_factory=tuple)
    include_strings: tuple[str, ...] = field(default_factory=tuple)
    order_by: str | None = None
    order_by_descending: str | None = None
    skip: int = 0
    take: int = 0
    is_paging_enabled: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "includes", tuple(self.includes))
        object.__setattr__(self, "include_strings", tuple(self.include_strings))
        if self.skip < 0:
            raise ValidationError(f"skip must be >= 0, got {self.skip}", path="skip")
        for name in self.includes:
            if not name or "." in name:
                raise ValidationError(
                    f"include '{name}' must name a single navigation property; "
                    "use include_strings for dotted paths",
                    path="includes",
                )
        for path in self.include_strings:
            if not path:
                raise ValidationError(
                    "include_strings entries must not be empty",
                    path="include_strings",
                )

    # -- copy-on-write helpers ------------------------------------------------

    def with_criteria(self, criteria: ICriteria[T] | None) -> Specification[T]:
        return replace(self, criteria=criteria)

    def with_include(self, *names: str) -> Specification[T]:
        return replace(self, includes=(*self.includes, *names))

    def with_include_string(self, *paths: str) -> Specification[T]:
        return replace(self, include_strings=(*self.include_strings, *paths))

    def with_order_by(self, key: str) -> Specification[T]:
        return replace(self, order_by=key, order_by_descending=None)

    def with_order_by_descending(self, key: str) -> Specification[T]:
        return replace(self, order_by=None, order_by_descending=key)

    def without_ordering(self) -> Specification[T]:
        return replace(self, order_by=None, order_by_descending=None)

    def with_paging(self, skip: int, take: int) -> Specification[T]:
        return replace(self, skip=skip, take=take, is_paging_enabled=True)

    def without_paging(self) -> Specification[T]:
        return replace(self, skip=0, take=0, is_paging_enabled=False)

    def merge(self, other: Specification[T]) -> Specification[T]:
        """
        Combine two specifications.

        - Criteria are combined with AND.
        - Includes and include strings are concatenated (``other`` appended).
        - ``other``'s ordering replaces ``self``'s when it has one.
        - ``other``'s paging replaces ``self``'s when it is enabled.
        """
        criteria = self.criteria
        if other.criteria is not None:
            criteria = (
                other.criteria
                if criteria is None
                else AndCriteria(criteria, other.criteria)
            )

        merged = replace(
            self,
            criteria=criteria,
            includes=(*self.includes, *other.includes),
            include_strings=(*self.include_strings, *other.include_strings),
        )
        if other.order_by is not None or other.order_by_descending is not None:
            merged = replace(
                merged,
                order_by=other.order_by,
                order_by_descending=other.order_by_descending,
            )
        if other.is_paging_enabled:
            merged = merged.with_paging(other.skip, other.take)
        return merged

    # -- serialisation --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dictionary; empty parts are omitted."""
        result: dict[str, Any] = {}
        if self.criteria is not None:
            result["criteria"] = self.criteria.to_dict()
        if self.includes:
            result["includes"] = list(self.includes)
        if self.include_strings:
            result["include_strings"] = list(self.include_strings)
        if self.order_by is not None:
            result["order_by"] = self.order_by
        if self.order_by_descending is not None:
            result["order_by_descending"] = self.order_by_descending
        if self.is_paging_enabled:
            result["skip"] = self.skip
            result["take"] = self.take
            result["is_paging_enabled"] = True
        return result

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        registry: MemoryOperatorRegistry | None = None,
        allowed_fields: Sequence[str] | None = None,
    ) -> Specification[T]:
        """
        Rebuild a specification produced by :meth:`to_dict`.

        The criteria tree is parsed by :class:`CriteriaFactory`, so it gets
        the same validation (and the same ``allowed_fields`` whitelist).
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"expected a dict, got {type(data).__name__}", path="<root>"
            )

        criteria: ICriteria[T] | None = None
        if data.get("criteria") is not None:
            if registry is None:
                registry = build_default_registry()
            criteria = CriteriaFactory.from_dict(
                data["criteria"], allowed_fields=allowed_fields, registry=registry
            )

        return cls(
            criteria=criteria,
            includes=tuple(data.get("includes", ())),
            include_strings=tuple(data.get("include_strings", ())),
            order_by=data.get("order_by"),
            order_by_descending=data.get("order_by_descending"),
            skip=int(data.get("skip", 0)),
            take=int(data.get("take", 0)),
            is_paging_enabled=bool(data.get("is_paging_enabled", False)),
        )
