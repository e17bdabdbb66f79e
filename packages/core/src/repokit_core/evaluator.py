"""
Compose a store query with the rules of a specification.

``SpecificationEvaluator.get_query`` is the single translation point between
an :class:`ISpecification` and a store's :class:`IQuery`.  It never executes
anything: it only chains ``where`` / ``include`` / ``order_by`` / ``skip`` /
``take`` calls on the query it is given and returns the result.

Application order
-----------------
1. criteria (absent criteria is the identity transform)
2. ``includes`` in order, then ``include_strings`` in order
3. ``order_by`` ascending, else ``order_by_descending``, else nothing
4. paging, only when ``is_paging_enabled``: skip then take, over the
   filtered and ordered sequence

Paging without ordering yields page boundaries that may differ between
calls.  That is left to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from .primitives.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from .domain.specification import ISpecification
    from .ports.query import IQuery

logger = logging.getLogger("repokit.evaluator")

T = TypeVar("T")


class SpecificationEvaluator:
    """Pure functions turning ``(base_query, spec)`` into a composed query."""

    @staticmethod
    def get_query(base_query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
        """
        Apply criteria, eager loading, ordering and paging to *base_query*.

        Raises:
            InvalidArgumentError: If ``spec.skip`` is negative.
        """
        SpecificationEvaluator.validate(spec)

        query = _apply_criteria(base_query, spec)
        query = _apply_includes(query, spec)
        query = _apply_ordering(query, spec)
        return _apply_paging(query, spec)

    @staticmethod
    def get_count_query(base_query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
        """
        Apply only the criteria of *spec*.

        Includes, ordering and paging shape the presentation of a result,
        not its cardinality, so they play no part in counting.
        """
        if spec is None:
            raise InvalidArgumentError("A specification is required")
        return _apply_criteria(base_query, spec)

    @staticmethod
    def validate(spec: ISpecification[T]) -> None:
        """Reject specifications no store could execute meaningfully."""
        if spec is None:
            raise InvalidArgumentError("A specification is required")
        if spec.skip < 0:
            raise InvalidArgumentError(f"skip must be >= 0, got {spec.skip}")


def _apply_criteria(query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
    if spec.criteria is None:
        return query
    return query.where(spec.criteria)


def _apply_includes(query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
    for path in spec.includes:
        query = query.include(path)
    for path in spec.include_strings:
        query = query.include(path)
    return query


def _apply_ordering(query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
    if spec.order_by is not None:
        if spec.order_by_descending is not None:
            logger.debug(
                "Both order_by=%s and order_by_descending=%s set; ascending wins",
                spec.order_by,
                spec.order_by_descending,
            )
        return query.order_by(spec.order_by)
    if spec.order_by_descending is not None:
        return query.order_by(spec.order_by_descending, descending=True)
    return query


def _apply_paging(query: IQuery[T], spec: ISpecification[T]) -> IQuery[T]:
    if not spec.is_paging_enabled:
        return query
    # take <= 0 asks for zero rows; it never means "no limit".
    take = max(spec.take, 0)
    logger.debug("Paging skip=%d take=%d", spec.skip, take)
    return query.skip(spec.skip).take(take)
