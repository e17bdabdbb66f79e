"""The same specifications give the same answers on every store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from pydantic import BaseModel, Field
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from repokit_core import Entity, EntityNotFoundError, InMemoryStore, Repository
from repokit_persistence_sqlalchemy import SQLAlchemyStore
from repokit_specifications import (
    FieldNotFoundError,
    Specification,
    SpecificationBuilder,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


# -- memory models -----------------------------------------------------------


class Order(BaseModel):
    status: str
    total: int = 0


class Customer(Entity):
    name: str
    rank: int = 0
    email: str | None = None
    orders: list[Order] = Field(default_factory=list)


# -- mapped models -----------------------------------------------------------


class Base(DeclarativeBase):
    pass


class CustomerRow(Base):
    __tablename__ = "parity_customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    rank: Mapped[int] = mapped_column(default=0)
    email: Mapped[str | None] = mapped_column(String(100), default=None)
    orders: Mapped[list[OrderRow]] = relationship(cascade="all, delete-orphan")


class OrderRow(Base):
    __tablename__ = "parity_orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("parity_customers.id")
    )
    status: Mapped[str] = mapped_column(String(20))
    total: Mapped[int] = mapped_column(default=0)


# name, rank, email, [(status, total), ...]
ROWS: list[tuple[str, int, str | None, list[tuple[str, int]]]] = [
    ("ada", 1, None, [("open", 150)]),
    ("bob", 2, "bob@example.com", [("open", 30)]),
    ("dan", 3, "dan@example.com", []),
    ("cy", 4, None, [("closed", 120), ("open", 5)]),
]


def _memory_customers() -> list[Customer]:
    return [
        Customer(
            name=name,
            rank=rank,
            email=email,
            orders=[Order(status=s, total=t) for s, t in orders],
        )
        for name, rank, email, orders in ROWS
    ]


def _mapped_customers() -> list[CustomerRow]:
    return [
        CustomerRow(
            name=name,
            rank=rank,
            email=email,
            orders=[OrderRow(status=s, total=t) for s, t in orders],
        )
        for name, rank, email, orders in ROWS
    ]


@pytest.fixture(params=["memory", "sqlalchemy"])
async def customers(request: pytest.FixtureRequest) -> AsyncIterator[Repository[Any]]:
    """A repository over each store, seeded with the same four customers."""
    if request.param == "memory":
        repo: Repository[Any] = Repository(Customer, InMemoryStore())
        await repo.add_many(_memory_customers())
        yield repo
        return

    store = SQLAlchemyStore.from_url(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    assert store.engine is not None
    async with store.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    repo = Repository(CustomerRow, store)
    await repo.add_many(_mapped_customers())
    yield repo
    await store.dispose()


def spec() -> SpecificationBuilder:
    return SpecificationBuilder()


async def names(repo: Repository[Any], built: Specification[Any]) -> list[str]:
    return [c.name for c in await repo.list(built)]


@pytest.mark.asyncio
class TestStoreParity:
    async def test_not_equal_skips_null(self, customers: Repository[Any]) -> None:
        built = spec().where("email", "!=", "bob@example.com").order_by("name")

        assert await names(customers, built.build()) == ["dan"]

    async def test_not_in_skips_null(self, customers: Repository[Any]) -> None:
        built = spec().where("email", "not_in", ["bob@example.com"]).order_by("name")

        assert await names(customers, built.build()) == ["dan"]

    async def test_is_null(self, customers: Repository[Any]) -> None:
        built = spec().where("email", "is_null").order_by("name").build()

        assert await names(customers, built) == ["ada", "cy"]

    async def test_in_accepts_comma_separated_string(
        self, customers: Repository[Any]
    ) -> None:
        listed = spec().where("name", "in", "ada, bob").order_by("name").build()
        fragment = spec().where("name", "in", "an").build()

        assert await names(customers, listed) == ["ada", "bob"]
        assert await names(customers, fragment) == []

    async def test_not_in_accepts_comma_separated_string(
        self, customers: Repository[Any]
    ) -> None:
        built = spec().where("name", "not_in", "ada,bob").order_by("name").build()

        assert await names(customers, built) == ["cy", "dan"]

    async def test_dotted_path_matches_any_child(
        self, customers: Repository[Any]
    ) -> None:
        built = spec().where("orders.total", ">", 100).order_by("name").build()

        assert await names(customers, built) == ["ada", "cy"]

    async def test_negated_dotted_path_includes_childless(
        self, customers: Repository[Any]
    ) -> None:
        built = Specification.from_dict(
            {
                "criteria": {
                    "op": "not",
                    "condition": {"op": "=", "attr": "orders.status", "val": "open"},
                },
                "order_by": "name",
            }
        )

        assert await names(customers, built) == ["dan"]

    async def test_from_dict_tree(self, customers: Repository[Any]) -> None:
        built = Specification.from_dict(
            {
                "criteria": {
                    "op": "or",
                    "conditions": [
                        {"op": "=", "attr": "orders.status", "val": "closed"},
                        {"op": "between", "attr": "rank", "val": [2, 3]},
                    ],
                },
                "order_by_descending": "rank",
            }
        )

        assert await names(customers, built) == ["cy", "dan", "bob"]

    async def test_count_ignores_paging(self, customers: Repository[Any]) -> None:
        built = spec().where("rank", ">", 1).order_by("rank").paginate(1, 1).build()

        assert await names(customers, built) == ["dan"]
        assert await customers.count(built) == 3

    async def test_unknown_field_raises(self, customers: Repository[Any]) -> None:
        with pytest.raises(FieldNotFoundError) as info:
            await customers.list(spec().where("nmae", "=", "ada").build())

        assert "name" in info.value.suggestions

    async def test_unknown_field_behind_relation_raises(
        self, customers: Repository[Any]
    ) -> None:
        with pytest.raises(FieldNotFoundError):
            await customers.list(spec().where("orders.totl", ">", 1).build())

    async def test_same_identity_twice_in_delete_batch_fails(
        self, customers: Repository[Any]
    ) -> None:
        first = (await customers.list(spec().order_by("name").build()))[0]

        with pytest.raises(EntityNotFoundError):
            await customers.delete_many([first, first])

        assert await customers.count(Specification()) == len(ROWS)
