"""Set operators: in, not_in, between, not_between.

Condition values go through :func:`parse_list_value`, so ``"a,b"`` and
``["a", "b"]`` mean the same thing here and in the SQL compiler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import ValidationError
from ..operators import CriteriaOperator
from ..utils import parse_list_value

if TYPE_CHECKING:
    from collections.abc import Callable


def in_(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    return field_value in parse_list_value(condition_value)


def not_in(field_value: Any, condition_value: Any) -> bool:
    # NULL NOT IN (...) is never true in SQL either.
    if field_value is None:
        return False
    return field_value not in parse_list_value(condition_value)


def _bounds(condition_value: Any) -> tuple[Any, Any]:
    items = parse_list_value(condition_value)
    if len(items) != 2:
        raise ValidationError(
            f"between expects exactly two bounds, got {condition_value!r}",
            path="val",
        )
    return items[0], items[1]


def between(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    low, high = _bounds(condition_value)
    return bool(low <= field_value <= high)


def not_between(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    return not between(field_value, condition_value)


SET_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], bool]] = {
    CriteriaOperator.IN: in_,
    CriteriaOperator.NOT_IN: not_in,
    CriteriaOperator.BETWEEN: between,
    CriteriaOperator.NOT_BETWEEN: not_between,
}
