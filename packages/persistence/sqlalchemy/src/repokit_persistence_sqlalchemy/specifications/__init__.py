"""Criteria-to-SQL compilation for SQLAlchemy models."""

from .compiler import (
    build_sqla_filter,
    resolve_attribute,
    resolve_column,
    resolve_relationship,
)
from .operators import DEFAULT_SQLA_REGISTRY, build_default_sqla_registry
from .strategy import (
    FunctionSQLAlchemyOperator,
    SQLAlchemyOperator,
    SQLAlchemyOperatorRegistry,
)

__all__ = [
    "build_sqla_filter",
    "resolve_attribute",
    "resolve_column",
    "resolve_relationship",
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
    "FunctionSQLAlchemyOperator",
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
]
