"""Tests for Repository over the InMemoryStore."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import Field

from repokit_core import (
    Entity,
    EntityNotFoundError,
    InMemoryStore,
    InvalidArgumentError,
    PermanentStoreError,
    Repository,
)


class Customer(Entity):
    name: str
    rank: int = 0
    tags: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class Where:
    """Minimal criteria: one attribute tested with a predicate."""

    attr: str
    test: Callable[[Any], bool]

    def is_satisfied_by(self, candidate: Any) -> bool:
        return self.test(getattr(candidate, self.attr))

    def to_dict(self) -> dict[str, Any]:
        return {"op": "custom", "attr": self.attr}


@dataclass(frozen=True)
class Spec:
    criteria: Any = None
    includes: tuple[str, ...] = ()
    include_strings: tuple[str, ...] = ()
    order_by: str | None = None
    order_by_descending: str | None = None
    skip: int = 0
    take: int = 0
    is_paging_enabled: bool = False


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def repo(store: InMemoryStore) -> Repository[Customer]:
    return Repository(Customer, store)


@pytest.fixture
async def ten(repo: Repository[Customer]) -> list[Customer]:
    """Ten customers with rank 1..10, inserted in shuffled order."""
    ranks = [7, 3, 10, 1, 5, 9, 2, 8, 4, 6]
    return await repo.add_many([Customer(name=f"c{r}", rank=r) for r in ranks])


@pytest.mark.asyncio
class TestInMemoryRepositoryCrud:
    async def test_add_assigns_identity(self, repo: Repository[Customer]) -> None:
        first = await repo.add(Customer(name="Ada"))
        second = await repo.add(Customer(name="Grace"))

        assert first.id == 1
        assert second.id == 2

    async def test_add_then_get_round_trips(self, repo: Repository[Customer]) -> None:
        added = await repo.add(Customer(name="Ada", rank=3, tags=["vip"]))

        fetched = await repo.get_by_id(added.id)

        assert fetched == added
        assert fetched is not added

    async def test_assigned_identity_counts_as_set(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add(Customer(name="Ada"))
        fetched = await repo.get_by_id(added.id)

        assert fetched is not None
        assert added.model_dump(exclude_unset=True)["id"] == added.id
        assert fetched.model_dump(exclude_unset=True) == {"id": added.id, "name": "Ada"}

    async def test_get_missing_returns_none(self, repo: Repository[Customer]) -> None:
        assert await repo.get_by_id(42) is None

    async def test_explicit_identity_is_kept(self, repo: Repository[Customer]) -> None:
        added = await repo.add(Customer(id=50, name="Fixed"))
        auto = await repo.add(Customer(name="Next"))

        assert added.id == 50
        assert auto.id == 51

    async def test_stored_state_isolated_from_caller(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add(Customer(name="Ada"))
        fetched = await repo.get_by_id(added.id)
        fetched.name = "Changed"
        added.name = "Also changed"

        again = await repo.get_by_id(added.id)

        assert again.name == "Ada"

    async def test_update_then_get_reflects_change(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add(Customer(name="Ada", rank=1))
        added.rank = 9

        await repo.update(added)

        assert (await repo.get_by_id(added.id)).rank == 9

    async def test_update_never_added_fails(self, repo: Repository[Customer]) -> None:
        with pytest.raises(EntityNotFoundError) as exc_info:
            await repo.update(Customer(id=99, name="Ghost"))

        assert exc_info.value.entity_id == 99
        assert exc_info.value.entity_type == "Customer"

    async def test_update_without_identity_rejected(
        self, repo: Repository[Customer]
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repo.update(Customer(name="New"))

    async def test_delete_then_get_returns_none(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add(Customer(name="Ada"))

        await repo.delete(added)

        assert await repo.get_by_id(added.id) is None

    async def test_repeated_delete_fails(self, repo: Repository[Customer]) -> None:
        added = await repo.add(Customer(name="Ada"))
        await repo.delete(added)

        with pytest.raises(EntityNotFoundError):
            await repo.delete(added)

    async def test_none_entity_rejected(self, repo: Repository[Customer]) -> None:
        with pytest.raises(InvalidArgumentError):
            await repo.add(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError):
            await repo.delete(None)  # type: ignore[arg-type]

    async def test_entity_without_id_attribute_rejected(
        self, store: InMemoryStore
    ) -> None:
        repo: Repository[Any] = Repository(object, store)
        with pytest.raises(InvalidArgumentError):
            await repo.add(object())


@pytest.mark.asyncio
class TestInMemoryRepositoryBatches:
    async def test_add_many_assigns_identities(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        added = await repo.add_many([Customer(name="a"), Customer(name="b")])

        assert [c.id for c in added] == [1, 2]
        assert store.size(Customer) == 2

    async def test_empty_batches_are_noops(self, repo: Repository[Customer]) -> None:
        assert await repo.add_many([]) == []
        await repo.update_many([])
        await repo.delete_many([])

    async def test_mixed_explicit_and_generated_ids_do_not_collide(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add_many(
            [Customer(name="auto"), Customer(id=1, name="fixed")]
        )

        assert sorted(c.id for c in added) == [1, 2]

    async def test_batch_with_none_rejected(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repo.add_many([Customer(name="a"), None])  # type: ignore[list-item]

        assert store.size(Customer) == 0

    async def test_duplicate_identity_commits_nothing(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        await repo.add(Customer(id=1, name="existing"))

        with pytest.raises(PermanentStoreError) as exc_info:
            await repo.add_many([Customer(id=2, name="ok"), Customer(id=1, name="dup")])

        assert exc_info.value.batch_size == 2
        assert exc_info.value.retryable is False
        assert store.size(Customer) == 1

    async def test_update_many_is_all_or_nothing(
        self, repo: Repository[Customer]
    ) -> None:
        added = await repo.add(Customer(name="Ada", rank=1))
        added.rank = 5

        with pytest.raises(EntityNotFoundError):
            await repo.update_many([added, Customer(id=77, name="Ghost")])

        assert (await repo.get_by_id(added.id)).rank == 1

    async def test_delete_many_is_all_or_nothing(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        a = await repo.add(Customer(name="a"))
        b = await repo.add(Customer(name="b"))

        with pytest.raises(EntityNotFoundError):
            await repo.delete_many([a, Customer(id=77, name="Ghost"), b])

        assert store.size(Customer) == 2

    async def test_delete_many_removes_all(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        batch = await repo.add_many([Customer(name="a"), Customer(name="b")])

        await repo.delete_many(batch)

        assert store.size(Customer) == 0

    async def test_same_identity_twice_in_delete_batch_fails(
        self, repo: Repository[Customer]
    ) -> None:
        a = await repo.add(Customer(name="a"))

        with pytest.raises(EntityNotFoundError):
            await repo.delete_many([a, a])

        assert await repo.get_by_id(a.id) is not None


@pytest.mark.asyncio
class TestInMemoryRepositoryQueries:
    async def test_list_all_ordered_by_identity(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        listed = await repo.list_all()
        assert [c.id for c in listed] == list(range(1, 11))

    async def test_list_without_criteria_equals_list_all(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        listed = await repo.list(Spec(order_by="id"))
        assert listed == await repo.list_all()

    async def test_list_filters_by_criteria(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        listed = await repo.list(
            Spec(criteria=Where("rank", lambda r: r > 7), order_by="rank")
        )
        assert [c.rank for c in listed] == [8, 9, 10]

    async def test_ordering_descending(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        listed = await repo.list(Spec(order_by_descending="rank"))
        assert [c.rank for c in listed] == list(range(10, 0, -1))

    async def test_ascending_wins_over_descending(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        listed = await repo.list(Spec(order_by="rank", order_by_descending="rank"))
        assert [c.rank for c in listed] == list(range(1, 11))

    async def test_paging_window(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(order_by="rank", skip=3, take=4, is_paging_enabled=True)

        listed = await repo.list(spec)

        assert [c.rank for c in listed] == [4, 5, 6, 7]

    async def test_take_zero_returns_empty_page(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(order_by="rank", skip=0, take=0, is_paging_enabled=True)
        assert await repo.list(spec) == []

    async def test_skip_past_end_returns_empty_page(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(order_by="rank", skip=20, take=5, is_paging_enabled=True)
        assert await repo.list(spec) == []

    async def test_negative_skip_rejected(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        with pytest.raises(InvalidArgumentError):
            await repo.list(Spec(skip=-1, take=2, is_paging_enabled=True))

    async def test_count_ignores_paging_and_ordering(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(
            criteria=Where("rank", lambda r: r % 2 == 0),
            order_by="rank",
            skip=1,
            take=2,
            is_paging_enabled=True,
        )

        unpaged = await repo.list(Spec(criteria=spec.criteria))

        assert await repo.count(spec) == len(unpaged) == 5

    async def test_get_single_by_spec_none(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(criteria=Where("rank", lambda r: r > 100))
        assert await repo.get_single_by_spec(spec) is None

    async def test_get_single_by_spec_first_in_order(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(criteria=Where("rank", lambda r: r > 5), order_by_descending="rank")

        single = await repo.get_single_by_spec(spec)

        assert single is not None
        assert single.rank == 10

    async def test_includes_are_validated(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        assert len(await repo.list(Spec(includes=("tags",)))) == 10

        with pytest.raises(InvalidArgumentError):
            await repo.list(Spec(include_strings=("orders.lines",)))

    async def test_spec_is_reusable(
        self, repo: Repository[Customer], ten: list[Customer]
    ) -> None:
        spec = Spec(criteria=Where("rank", lambda r: r <= 3), order_by="rank")

        first = await repo.list(spec)
        second = await repo.list(spec)

        assert first == second


@pytest.mark.asyncio
class TestInMemoryStoreSession:
    async def test_leaving_without_commit_discards(self, store: InMemoryStore) -> None:
        async with store.session() as session:
            await session.entity_set(Customer).add(Customer(name="pending"))

        assert store.size(Customer) == 0

    async def test_clear_resets_tables_and_sequences(
        self, repo: Repository[Customer], store: InMemoryStore
    ) -> None:
        await repo.add(Customer(name="a"))

        store.clear()
        added = await repo.add(Customer(name="b"))

        assert store.size(Customer) == 1
        assert added.id == 1

    async def test_types_have_independent_tables(self, store: InMemoryStore) -> None:
        class Supplier(Entity):
            name: str

        customers = Repository(Customer, store)
        suppliers = Repository(Supplier, store)

        await customers.add(Customer(name="c"))
        supplier = await suppliers.add(Supplier(name="s"))

        assert supplier.id == 1
        assert await suppliers.get_by_id(1) == supplier
