"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol and a registry that maps
CriteriaOperator → evaluation function.

New operators are added by subclassing MemoryOperator and registering
via ``register()``, or by handing a plain function to ``register_func()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .exceptions import OperatorNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .operators import CriteriaOperator


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated object with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> CriteriaOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The actual value resolved from the candidate entity.
            condition_value: The value carried by the criteria.
        """
        ...


class FunctionOperator(MemoryOperator):
    """Adapts a ``(field_value, condition_value) -> bool`` function."""

    def __init__(
        self, name: CriteriaOperator, func: Callable[[Any, Any], bool]
    ) -> None:
        self._name = name
        self._func = func

    @property
    def name(self) -> CriteriaOperator:
        return self._name

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return bool(self._func(field_value, condition_value))

    def __repr__(self) -> str:
        return f"FunctionOperator({self._name.value!r}, {self._func.__name__})"


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by CriteriaOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register_func(CriteriaOperator.EQ, lambda a, b: a == b)

        result = registry.evaluate(CriteriaOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[CriteriaOperator, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[operator.name] = operator

    def register_func(
        self, name: CriteriaOperator, func: Callable[[Any, Any], bool]
    ) -> None:
        """Register a plain function as the strategy for *name*."""
        self.register(FunctionOperator(name, func))

    def register_all(self, *operators: MemoryOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: CriteriaOperator) -> None:
        self._operators.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: CriteriaOperator) -> MemoryOperator | None:
        return self._operators.get(name)

    def has(self, name: CriteriaOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[CriteriaOperator]:
        return set(self._operators.keys())

    # -- evaluation shortcut -------------------------------------------------

    def evaluate(
        self,
        name: CriteriaOperator,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            OperatorNotFoundError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise OperatorNotFoundError(
                name.value, [o.value for o in self.supported_operators]
            )
        return op.evaluate(field_value, condition_value)
