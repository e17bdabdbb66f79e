"""Standard comparison operators: =, !=, >, <, >=, <=."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

from ..operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable


def _not_null(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """Comparisons other than ``=`` never match a missing value, as in SQL."""

    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        return bool(compare(field_value, condition_value))

    evaluate.__name__ = compare.__name__
    return evaluate


STANDARD_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], bool]] = {
    CriteriaOperator.EQ: operator.eq,
    CriteriaOperator.NE: _not_null(operator.ne),
    CriteriaOperator.GT: _not_null(operator.gt),
    CriteriaOperator.LT: _not_null(operator.lt),
    CriteriaOperator.GE: _not_null(operator.ge),
    CriteriaOperator.LE: _not_null(operator.le),
}
