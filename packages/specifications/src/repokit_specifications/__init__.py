from .ast import AttributeCriteria, CriteriaFactory
from .base import AndCriteria, BaseCriteria, NotCriteria, OrCriteria
from .builder import CriteriaBuilder, SpecificationBuilder
from .exceptions import (
    FieldNotFoundError,
    FieldNotQueryableError,
    OperatorNotFoundError,
    RelationshipTraversalError,
    SpecificationError,
    ValidationError,
)
from .operators import CriteriaOperator
from .operators_memory import build_default_registry
from .specification import Specification
from .strategy import FunctionOperator, MemoryOperator, MemoryOperatorRegistry
from .utils import cast_value, parse_interval, parse_list_value

__all__ = [
    # Criteria tree
    "CriteriaOperator",
    "AttributeCriteria",
    "CriteriaFactory",
    "BaseCriteria",
    "AndCriteria",
    "OrCriteria",
    "NotCriteria",
    # Specification
    "Specification",
    # Builders
    "CriteriaBuilder",
    "SpecificationBuilder",
    # Evaluation strategy
    "MemoryOperator",
    "FunctionOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    # Exceptions
    "SpecificationError",
    "ValidationError",
    "OperatorNotFoundError",
    "FieldNotFoundError",
    "FieldNotQueryableError",
    "RelationshipTraversalError",
    # Utilities
    "cast_value",
    "parse_interval",
    "parse_list_value",
]
