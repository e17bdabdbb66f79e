"""Entity identity capability and a convenience pydantic base."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class HasIdentity(Protocol):
    """
    Capability required of every persisted type.

    Anything exposing an integer ``id`` attribute qualifies: pydantic
    models, dataclasses, SQLAlchemy declarative models.  ``None`` means
    "not yet persisted"; the store assigns the key on creation.
    """

    id: int | None


class Entity(BaseModel):
    """Optional base for domain entities.

    Usage::

        class Customer(Entity):
            name: str
            active: bool = True

        customer = Customer(name="Ada")  # id assigned by the store
        customer = Customer(id=7, name="Ada")  # deterministic id for tests
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int | None = None
