"""Standard comparison operators for SQLAlchemy: =, !=, >, <, >=, <=."""

from __future__ import annotations

import operator
from typing import TYPE_CHECKING, Any

from repokit_specifications.operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement

# Column operator overloads already produce SQL; ``== None`` renders IS NULL.
STANDARD_OPERATORS: dict[
    CriteriaOperator, Callable[[Any, Any], ColumnElement[bool]]
] = {
    CriteriaOperator.EQ: operator.eq,
    CriteriaOperator.NE: operator.ne,
    CriteriaOperator.GT: operator.gt,
    CriteriaOperator.LT: operator.lt,
    CriteriaOperator.GE: operator.ge,
    CriteriaOperator.LE: operator.le,
}
