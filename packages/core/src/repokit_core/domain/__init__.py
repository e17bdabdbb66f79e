"""Domain primitives: identity capability and query contracts."""

from __future__ import annotations

from .entity import Entity, HasIdentity
from .specification import ICriteria, ISpecification

__all__ = [
    "Entity",
    "HasIdentity",
    "ICriteria",
    "ISpecification",
]
