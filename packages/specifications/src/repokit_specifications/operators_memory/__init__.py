"""
In-memory operator implementations.

Each module maps CriteriaOperator → ``(field_value, condition_value) -> bool``
and ``build_default_registry`` registers them all.

Usage::

    from repokit_specifications.operators_memory import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(CriteriaOperator.EQ, actual, expected)
"""

from __future__ import annotations

from ..strategy import MemoryOperatorRegistry
from .null import NULL_OPERATORS
from .set import SET_OPERATORS
from .standard import STANDARD_OPERATORS
from .string import STRING_OPERATORS


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Returns a fresh instance on every call, so callers may register or
    unregister operators without affecting anyone else.

    Example:
        >>> registry = build_default_registry()
        >>> registry.evaluate(CriteriaOperator.EQ, "active", "active")
        True
    """
    registry = MemoryOperatorRegistry()
    for table in (STANDARD_OPERATORS, SET_OPERATORS, STRING_OPERATORS, NULL_OPERATORS):
        for name, func in table.items():
            registry.register_func(name, func)
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
