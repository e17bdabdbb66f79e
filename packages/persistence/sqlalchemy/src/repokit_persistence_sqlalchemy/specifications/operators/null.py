"""Null / empty check operators for SQLAlchemy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, or_

from repokit_specifications.operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement


def is_null(column: Any, _value: Any) -> ColumnElement[bool]:
    return column.is_(None)


def is_not_null(column: Any, _value: Any) -> ColumnElement[bool]:
    return column.is_not(None)


def is_empty(column: Any, _value: Any) -> ColumnElement[bool]:
    """NULL or the empty string, matching the in-memory definition."""
    return or_(column.is_(None), column == "")


def is_not_empty(column: Any, _value: Any) -> ColumnElement[bool]:
    return and_(column.is_not(None), column != "")


NULL_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], ColumnElement[bool]]] = {
    CriteriaOperator.IS_NULL: is_null,
    CriteriaOperator.IS_NOT_NULL: is_not_null,
    CriteriaOperator.IS_EMPTY: is_empty,
    CriteriaOperator.IS_NOT_EMPTY: is_not_empty,
}
