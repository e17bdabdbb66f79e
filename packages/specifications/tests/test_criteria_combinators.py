"""Tests for AttributeCriteria evaluation and the logical combinators."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from repokit_specifications import (
    AndCriteria,
    AttributeCriteria,
    FieldNotFoundError,
    NotCriteria,
    OperatorNotFoundError,
    OrCriteria,
)


@dataclass
class Product:
    sku: str


@dataclass
class Line:
    product: Product
    qty: int


@dataclass
class Order:
    id: int
    status: str
    total: int
    lines: list[Line] = field(default_factory=list)
    customer: dict | None = None


@pytest.fixture
def order() -> Order:
    return Order(
        id=1,
        status="open",
        total=120,
        lines=[Line(Product("A-1"), 2), Line(Product("B-7"), 1)],
        customer={"name": "Ada"},
    )


def test_operator_accepts_string_and_enum(registry, order):
    by_str = AttributeCriteria("total", ">=", 100, registry=registry)
    by_upper = AttributeCriteria("status", "ICONTAINS", "OP", registry=registry)

    assert by_str.is_satisfied_by(order) is True
    assert by_upper.is_satisfied_by(order) is True


def test_unknown_operator_rejected(registry):
    with pytest.raises(OperatorNotFoundError):
        AttributeCriteria("total", "~=", 1, registry=registry)


def test_registry_required():
    with pytest.raises(ValueError, match="registry"):
        AttributeCriteria("total", "=", 1, registry=None)  # type: ignore[arg-type]


def test_collection_path_matches_any_element(registry, order):
    hit = AttributeCriteria("lines.product.sku", "=", "B-7", registry=registry)
    miss = AttributeCriteria("lines.product.sku", "=", "Z-0", registry=registry)

    assert hit.is_satisfied_by(order) is True
    assert miss.is_satisfied_by(order) is False


def test_empty_collection_never_matches(registry, order):
    order.lines = []
    criteria = AttributeCriteria("lines.qty", "is_null", registry=registry)
    assert criteria.is_satisfied_by(order) is False


def test_missing_relation_never_matches(registry, order):
    order.customer = None
    criteria = AttributeCriteria("customer.name", "is_null", registry=registry)
    assert criteria.is_satisfied_by(order) is False


def test_dict_values_are_traversed(registry, order):
    criteria = AttributeCriteria("customer.name", "=", "Ada", registry=registry)
    assert criteria.is_satisfied_by(order) is True


def test_combinators(registry, order):
    is_open = AttributeCriteria("status", "=", "open", registry=registry)
    is_small = AttributeCriteria("total", "<", 50, registry=registry)

    assert (is_open & ~is_small).is_satisfied_by(order) is True
    assert (is_small | ~is_open).is_satisfied_by(order) is False
    assert isinstance(is_open & is_small, AndCriteria)
    assert isinstance(is_open | is_small, OrCriteria)
    assert isinstance(~is_open, NotCriteria)
    assert isinstance(is_open.merge(is_small), AndCriteria)


def test_to_dict_shapes(registry):
    is_open = AttributeCriteria("status", "=", "open", registry=registry)
    tree = ~(is_open | AttributeCriteria("total", ">", 10, registry=registry))

    assert tree.to_dict() == {
        "op": "not",
        "conditions": [
            {
                "op": "or",
                "conditions": [
                    {"op": "=", "attr": "status", "val": "open"},
                    {"op": ">", "attr": "total", "val": 10},
                ],
            }
        ],
    }


def test_repr_shows_tree(registry):
    criteria = AttributeCriteria("status", "=", "open", registry=registry)
    assert repr(criteria).startswith("AttributeCriteria(")


def test_unknown_attribute_raises(registry, order):
    criteria = AttributeCriteria("stauts", "is_null", registry=registry)

    with pytest.raises(FieldNotFoundError) as info:
        criteria.is_satisfied_by(order)

    assert info.value.model_name == "Order"
    assert "status" in info.value.suggestions
    assert info.value.full_path == "stauts"


def test_unknown_attribute_behind_relation_raises(registry, order):
    criteria = AttributeCriteria("lines.product.skew", "=", "A-1", registry=registry)

    with pytest.raises(FieldNotFoundError) as info:
        criteria.is_satisfied_by(order)

    assert info.value.model_name == "Product"
    assert info.value.full_path == "lines.product.skew"


def test_missing_relation_skips_unknown_attribute(registry, order):
    order.customer = None
    criteria = AttributeCriteria("customer.nickname", "=", "x", registry=registry)
    assert criteria.is_satisfied_by(order) is False


def test_missing_mapping_key_reads_as_none(registry, order):
    criteria = AttributeCriteria("customer.nickname", "is_null", registry=registry)
    assert criteria.is_satisfied_by(order) is True
