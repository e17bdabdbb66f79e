"""
SQLAlchemy operator implementations and default registry.

Usage::

    from repokit_persistence_sqlalchemy.specifications.operators import (
        DEFAULT_SQLA_REGISTRY,
    )

    expr = DEFAULT_SQLA_REGISTRY.apply(CriteriaOperator.EQ, column, value)
"""

from __future__ import annotations

from ..strategy import SQLAlchemyOperatorRegistry
from .null import NULL_OPERATORS
from .set import SET_OPERATORS
from .standard import STANDARD_OPERATORS
from .string import STRING_OPERATORS


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with all built-in SQLAlchemy operators."""
    registry = SQLAlchemyOperatorRegistry()
    for table in (STANDARD_OPERATORS, SET_OPERATORS, STRING_OPERATORS, NULL_OPERATORS):
        for name, func in table.items():
            registry.register_func(name, func)
    return registry


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "SQLAlchemyOperatorRegistry",
]
