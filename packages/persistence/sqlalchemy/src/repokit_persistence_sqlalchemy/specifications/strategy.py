"""
SQLAlchemy operator compilation strategy.

Mirrors the in-memory ``MemoryOperatorRegistry``: each CriteriaOperator maps
to an object turning ``(column, value)`` into a ``ColumnElement[bool]``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from repokit_specifications.exceptions import OperatorNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement

    from repokit_specifications.operators import CriteriaOperator


class SQLAlchemyOperator(ABC):
    """
    Strategy interface for compiling a criteria operator
    into a SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> CriteriaOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Build a SQLAlchemy filter clause.

        Args:
            column: A SQLAlchemy column or instrumented attribute.
            value: The condition value carried by the criteria.
        """
        ...


class FunctionSQLAlchemyOperator(SQLAlchemyOperator):
    """Adapts a ``(column, value) -> ColumnElement[bool]`` function."""

    def __init__(
        self,
        name: CriteriaOperator,
        func: Callable[[Any, Any], ColumnElement[bool]],
    ) -> None:
        self._name = name
        self._func = func

    @property
    def name(self) -> CriteriaOperator:
        return self._name

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return self._func(column, value)


class SQLAlchemyOperatorRegistry:
    """Registry of ``SQLAlchemyOperator`` instances keyed by CriteriaOperator."""

    def __init__(self) -> None:
        self._operators: dict[CriteriaOperator, SQLAlchemyOperator] = {}

    def register(self, operator: SQLAlchemyOperator) -> None:
        self._operators[operator.name] = operator

    def register_func(
        self,
        name: CriteriaOperator,
        func: Callable[[Any, Any], ColumnElement[bool]],
    ) -> None:
        self.register(FunctionSQLAlchemyOperator(name, func))

    def unregister(self, name: CriteriaOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: CriteriaOperator) -> SQLAlchemyOperator | None:
        return self._operators.get(name)

    def has(self, name: CriteriaOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[CriteriaOperator]:
        return set(self._operators.keys())

    def apply(
        self,
        name: CriteriaOperator,
        column: Any,
        value: Any,
    ) -> ColumnElement[bool]:
        """
        Look up the operator and apply.

        Raises:
            OperatorNotFoundError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise OperatorNotFoundError(
                str(getattr(name, "value", name)),
                [o.value for o in self.supported_operators],
            )
        return op.apply(column, value)
