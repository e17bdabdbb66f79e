"""repokit-core: persistence-ignorant repository and specification evaluator.

Zero infrastructure dependencies. pydantic for the optional ``Entity`` base.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import (
    InMemoryEntitySet,
    InMemoryStore,
    InMemoryStoreSession,
    MemoryQuery,
)

# ── Domain ───────────────────────────────────────────────────────
from .domain import Entity, HasIdentity, ICriteria, ISpecification
from .evaluator import SpecificationEvaluator

# ── Ports ────────────────────────────────────────────────────────
from .ports import IEntitySet, IQuery, IRepository, IStore, IStoreSession

# ── Primitives ───────────────────────────────────────────────────
from .primitives.exceptions import (
    EntityNotFoundError,
    InfrastructureError,
    InvalidArgumentError,
    NotFoundError,
    PermanentStoreError,
    PersistenceError,
    RepoKitError,
    StoreError,
    TransientStoreError,
)
from .repository import Repository

__all__ = [
    # Adapters
    "InMemoryEntitySet",
    "InMemoryStore",
    "InMemoryStoreSession",
    "MemoryQuery",
    # Domain
    "Entity",
    "HasIdentity",
    "ICriteria",
    "ISpecification",
    # Evaluation / repository
    "SpecificationEvaluator",
    "Repository",
    # Ports
    "IEntitySet",
    "IQuery",
    "IRepository",
    "IStore",
    "IStoreSession",
    # Exceptions
    "RepoKitError",
    "NotFoundError",
    "EntityNotFoundError",
    "InvalidArgumentError",
    "InfrastructureError",
    "PersistenceError",
    "StoreError",
    "TransientStoreError",
    "PermanentStoreError",
]
