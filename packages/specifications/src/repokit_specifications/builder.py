"""
Fluent builders for criteria trees and specifications.

Example::

    criteria = (
        CriteriaBuilder()
        .or_group()
            .where("role", "=", "admin")
            .where("role", "=", "owner")
        .end_group()
        .where("active", "=", True)
        .build()
    )
    # → AND(OR(role == "admin", role == "owner"), active == True)

    spec = (
        SpecificationBuilder()
        .criteria(criteria)
        .include("orders")
        .order_by("id")
        .page(2, 20)
        .build()
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .ast import AttributeCriteria
from .base import AndCriteria, NotCriteria, OrCriteria
from .exceptions import ValidationError
from .operators_memory import build_default_registry
from .specification import Specification

if TYPE_CHECKING:
    from repokit_core.domain.specification import ICriteria

    from .operators import CriteriaOperator
    from .strategy import MemoryOperatorRegistry

T = TypeVar("T")


class CriteriaBuilder:
    """
    Fluent builder for composing criteria trees.

    Conditions added at the same level are combined with AND.  Use
    ``or_group()`` / ``and_group()`` / ``not_group()`` for explicit
    grouping and ``end_group()`` to close the current group.
    """

    def __init__(self, registry: MemoryOperatorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else build_default_registry()
        self._root: list[ICriteria[Any]] = []
        self._groups: list[tuple[str, list[ICriteria[Any]]]] = []

    @property
    def registry(self) -> MemoryOperatorRegistry:
        return self._registry

    def where(
        self, attr: str, op: CriteriaOperator | str, val: Any = None
    ) -> CriteriaBuilder:
        """Add one attribute condition to the current group."""
        self._level().append(AttributeCriteria(attr, op, val, registry=self._registry))
        return self

    def add(self, criteria: ICriteria[Any]) -> CriteriaBuilder:
        """Add an already-built criteria node to the current group."""
        self._level().append(criteria)
        return self

    def and_group(self) -> CriteriaBuilder:
        self._groups.append(("and", []))
        return self

    def or_group(self) -> CriteriaBuilder:
        self._groups.append(("or", []))
        return self

    def not_group(self) -> CriteriaBuilder:
        """Open a NOT group; it must receive exactly one condition."""
        self._groups.append(("not", []))
        return self

    def end_group(self) -> CriteriaBuilder:
        if not self._groups:
            raise ValidationError("No open group to close", path="builder")
        op, children = self._groups.pop()
        self._level().append(_combine(op, children))
        return self

    def is_empty(self) -> bool:
        return not self._root and not self._groups

    def build(self) -> ICriteria[Any]:
        """
        Return the composed tree.  A single top-level condition is returned
        as is; several are combined with AND.

        Raises:
            ValidationError: If a group is still open or nothing was added.
        """
        if self._groups:
            raise ValidationError(
                f"{len(self._groups)} group(s) still open; "
                "call end_group() before build()",
                path="builder",
            )
        if not self._root:
            raise ValidationError("No conditions added to builder", path="builder")
        return _combine("and", self._root)

    def reset(self) -> CriteriaBuilder:
        self._root.clear()
        self._groups.clear()
        return self

    def _level(self) -> list[ICriteria[Any]]:
        return self._groups[-1][1] if self._groups else self._root


def _combine(op: str, children: list[ICriteria[Any]]) -> ICriteria[Any]:
    if not children:
        raise ValidationError("Cannot create an empty group", path="builder")
    if op == "not":
        if len(children) != 1:
            raise ValidationError(
                "NOT group must contain exactly one condition", path="builder"
            )
        return NotCriteria(children[0])
    if len(children) == 1:
        return children[0]
    return AndCriteria(*children) if op == "and" else OrCriteria(*children)


class SpecificationBuilder(Generic[T]):
    """
    Fluent builder for :class:`Specification`.

    ``where`` calls accumulate AND-ed conditions; ``criteria`` adds a
    prebuilt tree to the same conjunction.
    """

    def __init__(self, registry: MemoryOperatorRegistry | None = None) -> None:
        self._criteria = CriteriaBuilder(registry)
        self._includes: list[str] = []
        self._include_strings: list[str] = []
        self._order_by: str | None = None
        self._order_by_descending: str | None = None
        self._skip = 0
        self._take = 0
        self._paging = False

    def where(
        self, attr: str, op: CriteriaOperator | str, val: Any = None
    ) -> SpecificationBuilder[T]:
        self._criteria.where(attr, op, val)
        return self

    def criteria(self, criteria: ICriteria[T]) -> SpecificationBuilder[T]:
        self._criteria.add(criteria)
        return self

    def include(self, *names: str) -> SpecificationBuilder[T]:
        self._includes.extend(names)
        return self

    def include_string(self, *paths: str) -> SpecificationBuilder[T]:
        self._include_strings.extend(paths)
        return self

    def order_by(self, key: str) -> SpecificationBuilder[T]:
        self._order_by = key
        return self

    def order_by_descending(self, key: str) -> SpecificationBuilder[T]:
        self._order_by_descending = key
        return self

    def paginate(self, skip: int, take: int) -> SpecificationBuilder[T]:
        """Enable paging with an explicit window."""
        self._skip, self._take, self._paging = skip, take, True
        return self

    def page(self, number: int, size: int) -> SpecificationBuilder[T]:
        """Enable paging for the 1-based page *number* of *size* rows."""
        if number < 1:
            raise ValidationError(
                f"page number must be >= 1, got {number}", path="page"
            )
        return self.paginate((number - 1) * size, size)

    def build(self) -> Specification[T]:
        return Specification(
            criteria=None if self._criteria.is_empty() else self._criteria.build(),
            includes=tuple(self._includes),
            include_strings=tuple(self._include_strings),
            order_by=self._order_by,
            order_by_descending=self._order_by_descending,
            skip=self._skip,
            take=self._take,
            is_paging_enabled=self._paging,
        )
