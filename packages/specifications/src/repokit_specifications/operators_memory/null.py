"""Null / empty check operators: is_null, is_not_null, is_empty, is_not_empty."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable


def is_null(field_value: Any, _condition_value: Any) -> bool:
    return field_value is None


def is_not_null(field_value: Any, _condition_value: Any) -> bool:
    return field_value is not None


def is_empty(field_value: Any, _condition_value: Any) -> bool:
    """True for None, the empty string and empty collections; ``0`` is not empty."""
    if field_value is None:
        return True
    if isinstance(field_value, str | list | tuple | set | dict):
        return len(field_value) == 0
    return False


def is_not_empty(field_value: Any, _condition_value: Any) -> bool:
    return not is_empty(field_value, _condition_value)


NULL_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], bool]] = {
    CriteriaOperator.IS_NULL: is_null,
    CriteriaOperator.IS_NOT_NULL: is_not_null,
    CriteriaOperator.IS_EMPTY: is_empty,
    CriteriaOperator.IS_NOT_EMPTY: is_not_empty,
}
