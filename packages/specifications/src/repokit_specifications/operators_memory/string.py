"""String operators: like, not_like, ilike, contains, icontains, etc."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ..operators import CriteriaOperator

if TYPE_CHECKING:
    from collections.abc import Callable


def _like_regex(pattern: Any, flags: int = 0) -> re.Pattern[str]:
    """Convert a SQL LIKE pattern (``%``, ``_``) to an anchored regex."""
    body = re.escape(str(pattern)).replace("%", ".*").replace("_", ".")
    return re.compile(f"^{body}$", flags | re.DOTALL)


def like(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    return bool(_like_regex(condition_value).match(str(field_value)))


def not_like(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    return not like(field_value, condition_value)


def ilike(field_value: Any, condition_value: Any) -> bool:
    if field_value is None:
        return False
    return bool(_like_regex(condition_value, re.IGNORECASE).match(str(field_value)))


def _text_test(
    test: Callable[[str, str], bool], *, fold: bool = False
) -> Callable[[Any, Any], bool]:
    def evaluate(field_value: Any, condition_value: Any) -> bool:
        if field_value is None:
            return False
        haystack, needle = str(field_value), str(condition_value)
        if fold:
            haystack, needle = haystack.lower(), needle.lower()
        return test(haystack, needle)

    return evaluate


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack


STRING_OPERATORS: dict[CriteriaOperator, Callable[[Any, Any], bool]] = {
    CriteriaOperator.LIKE: like,
    CriteriaOperator.NOT_LIKE: not_like,
    CriteriaOperator.ILIKE: ilike,
    CriteriaOperator.CONTAINS: _text_test(_contains),
    CriteriaOperator.ICONTAINS: _text_test(_contains, fold=True),
    CriteriaOperator.STARTSWITH: _text_test(str.startswith),
    CriteriaOperator.ISTARTSWITH: _text_test(str.startswith, fold=True),
    CriteriaOperator.ENDSWITH: _text_test(str.endswith),
    CriteriaOperator.IENDSWITH: _text_test(str.endswith, fold=True),
}
