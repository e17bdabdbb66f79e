"""
Compile a criteria dictionary (AST) into a SQLAlchemy filter expression.

``build_sqla_filter`` walks the tree produced by ``criteria.to_dict()``;
logical nodes become ``and_`` / ``or_`` / ``not_`` and leaves are handed to
a ``SQLAlchemyOperatorRegistry``.

Dotted attribute paths cross relationships: collections compile to
``EXISTS`` via ``relationship.any(...)`` and scalar relations via
``relationship.has(...)``.

Field resolution goes through the model's mapper rather than ``getattr``,
so typos raise ``FieldNotFoundError`` with suggestions instead of silently
picking up an unrelated Python attribute.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import ColumnElement, and_, inspect, not_, or_
from sqlalchemy.orm import RelationshipProperty

from repokit_specifications.exceptions import (
    FieldNotFoundError,
    FieldNotQueryableError,
    OperatorNotFoundError,
    RelationshipTraversalError,
    ValidationError,
)
from repokit_specifications.operators import CriteriaOperator
from repokit_specifications.utils import cast_value

from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from .strategy import SQLAlchemyOperatorRegistry


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_sqla_filter(
    model: type[Any],
    data: dict[str, Any],
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> ColumnElement[bool]:
    """
    Build a SQLAlchemy filter expression from a criteria dictionary.

    Args:
        model: The SQLAlchemy mapped class.
        data: Criteria dictionary (JSON AST produced by ``criteria.to_dict()``).
        registry: Optional custom operator registry.  Falls back to
            ``DEFAULT_SQLA_REGISTRY``.

    Raises:
        FieldNotFoundError: Unknown attribute on the model.
        RelationshipTraversalError: A dotted path crosses a plain column.
        FieldNotQueryableError: The attribute is not mapped.
        OperatorNotFoundError: Unknown or unregistered operator.
    """
    reg = registry or DEFAULT_SQLA_REGISTRY
    return _compile_node(model, data, reg, prefix="")


def resolve_column(model: type[Any], name: str) -> Any:
    """
    Return the mapped column attribute *name* of *model*.

    Used for ordering, which only supports direct columns.
    """
    if "." in name:
        head = name.split(".", 1)[0]
        raise RelationshipTraversalError(head, model.__name__, full_path=name)
    attr, prop = resolve_attribute(model, name, full_path=name)
    if isinstance(prop, RelationshipProperty):
        raise FieldNotQueryableError(
            name, model.__name__, _available_fields(model), full_path=name
        )
    return attr


def resolve_relationship(
    model: type[Any], name: str, *, full_path: str
) -> tuple[Any, type[Any]]:
    """Return ``(relationship_attribute, target_class)`` for *name*."""
    attr, prop = resolve_attribute(model, name, full_path=full_path)
    if not isinstance(prop, RelationshipProperty):
        raise RelationshipTraversalError(name, model.__name__, full_path=full_path)
    return attr, prop.mapper.class_


def resolve_attribute(
    model: type[Any], name: str, *, full_path: str
) -> tuple[Any, Any]:
    """
    Resolve *name* on *model* through its mapper.

    Returns ``(instrumented_attribute, mapper_property)``; the property is
    ``None`` for hybrid attributes, which are queryable but not mapped.
    """
    mapper = inspect(model)
    if name in mapper.attrs:
        return getattr(model, name), mapper.attrs[name]
    if name in mapper.all_orm_descriptors:
        return getattr(model, name), None
    if hasattr(model, name):
        raise FieldNotQueryableError(
            name, model.__name__, _available_fields(model), full_path=full_path
        )
    raise FieldNotFoundError(
        name, model.__name__, _available_fields(model), full_path=full_path
    )


# ---------------------------------------------------------------------------
# Internal compilation
# ---------------------------------------------------------------------------


def _available_fields(model: type[Any]) -> list[str]:
    keys = inspect(model).all_orm_descriptors.keys()
    return [key for key in keys if not key.startswith("_")]


def _compile_node(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
    *,
    prefix: str,
) -> ColumnElement[bool]:
    if not isinstance(data, dict):
        raise ValidationError(
            f"expected a criteria dict, got {type(data).__name__}",
            path=prefix or "<root>",
        )
    op_str = str(data.get("op", "")).lower()

    if op_str in (CriteriaOperator.AND, CriteriaOperator.OR):
        children = [
            _compile_node(model, child, registry, prefix=prefix)
            for child in data.get("conditions", [])
        ]
        if not children:
            raise ValidationError(
                f"logical '{op_str}' requires at least one condition",
                path=prefix or "<root>",
            )
        return and_(*children) if op_str == CriteriaOperator.AND else or_(*children)

    if op_str == CriteriaOperator.NOT:
        conditions = data.get("conditions") or [data.get("condition")]
        if len(conditions) != 1 or conditions[0] is None:
            raise ValidationError(
                "'not' takes exactly one condition", path=prefix or "<root>"
            )
        return not_(_compile_node(model, conditions[0], registry, prefix=prefix))

    return _compile_leaf(model, data, registry, op_str, prefix=prefix)


def _compile_leaf(
    model: type[Any],
    data: dict[str, Any],
    registry: SQLAlchemyOperatorRegistry,
    op_str: str,
    *,
    prefix: str,
) -> ColumnElement[bool]:
    attr: str | None = data.get("attr")
    if not attr:
        raise ValidationError(
            f"criteria missing 'attr': {data}", path=prefix or "<root>"
        )

    try:
        op = CriteriaOperator(op_str)
    except ValueError:
        raise OperatorNotFoundError(
            op_str, [o.value for o in registry.supported_operators]
        ) from None

    full_path = f"{prefix}{attr}"
    head, _, rest = attr.partition(".")

    if rest:
        rel_attr, target = resolve_relationship(model, head, full_path=full_path)
        nested = {**data, "attr": rest}
        inner = _compile_leaf(
            target, nested, registry, op_str, prefix=f"{prefix}{head}."
        )
        if rel_attr.property.uselist:
            return cast("ColumnElement[bool]", rel_attr.any(inner))
        return cast("ColumnElement[bool]", rel_attr.has(inner))

    column, prop = resolve_attribute(model, head, full_path=full_path)
    if isinstance(prop, RelationshipProperty):
        raise FieldNotQueryableError(
            head, model.__name__, _available_fields(model), full_path=full_path
        )

    val = data.get("val")
    if data.get("value_type") is not None:
        val = cast_value(val, data["value_type"])
    return registry.apply(op, column, val)
