"""Set operators for SQLAlchemy: in, not_in, between, not_between."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import not_

from repokit_specifications.exceptions import ValidationError
from repokit_specifications.operators import CriteriaOperator
from repokit_specifications.utils import parse_list_value

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement


def in_(column: Any, value: Any) -> ColumnElement[bool]:
    return column.in_(parse_list_value(value))


def not_in(column: Any, value: Any) -> ColumnElement[bool]:
    return column.not_in(parse_list_value(value))


def _bounds(value: Any) -> tuple[Any, Any]:
    items = parse_list_value(value)
    if len(items) != 2:
        raise ValidationError(
            f"between expects exactly two bounds, got {value!r}", path="val"
        )
    return items[0], items[1]


def between(column: Any, value: Any) -> ColumnElement[bool]:
    low, high = _bounds(value)
    return column.between(low, high)


def not_between(column: Any, value: Any) -> ColumnElement[bool]:
    low, high = _bounds(value)
    return not_(column.between(low, high))


SET_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], ColumnElement[bool]]] = {
    CriteriaOperator.IN: in_,
    CriteriaOperator.NOT_IN: not_in,
    CriteriaOperator.BETWEEN: between,
    CriteriaOperator.NOT_BETWEEN: not_between,
}
