"""String operators for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from repokit_specifications.operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement


def like(column: Any, value: Any) -> ColumnElement[bool]:
    return column.like(value)


def not_like(column: Any, value: Any) -> ColumnElement[bool]:
    return column.not_like(value)


def ilike(column: Any, value: Any) -> ColumnElement[bool]:
    return column.ilike(value)


def contains(column: Any, value: Any) -> ColumnElement[bool]:
    return column.contains(value, autoescape=True)


def icontains(column: Any, value: Any) -> ColumnElement[bool]:
    return column.icontains(value, autoescape=True)


def startswith(column: Any, value: Any) -> ColumnElement[bool]:
    return column.startswith(value, autoescape=True)


def istartswith(column: Any, value: Any) -> ColumnElement[bool]:
    return column.istartswith(value, autoescape=True)


def endswith(column: Any, value: Any) -> ColumnElement[bool]:
    return column.endswith(value, autoescape=True)


def iendswith(column: Any, value: Any) -> ColumnElement[bool]:
    return column.iendswith(value, autoescape=True)


STRING_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], ColumnElement[bool]]] = {
    CriteriaOperator.LIKE: like,
    CriteriaOperator.NOT_LIKE: not_like,
    CriteriaOperator.ILIKE: ilike,
    CriteriaOperator.CONTAINS: contains,
    CriteriaOperator.ICONTAINS: icontains,
    CriteriaOperator.STARTSWITH: startswith,
    CriteriaOperator.ISTARTSWITH: istartswith,
    CriteriaOperator.ENDSWITH: endswith,
    CriteriaOperator.IENDSWITH: iendswith,
}
