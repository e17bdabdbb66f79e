"""SQLAlchemyQuery: ``IQuery`` over a SQLAlchemy ``Select``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from repokit_core.primitives.exceptions import InvalidArgumentError

from .specifications.compiler import (
    build_sqla_filter,
    resolve_column,
    resolve_relationship,
)

if TYPE_CHECKING:
    from sqlalchemy.orm.strategy_options import _AbstractLoad

    from repokit_core.domain.specification import ICriteria

    from .specifications.strategy import SQLAlchemyOperatorRegistry

T = TypeVar("T")


class SQLAlchemyQuery(Generic[T]):
    """
    Immutable wrapper around a ``Select`` of one mapped class.

    - ``where`` compiles ``criteria.to_dict()`` with ``build_sqla_filter``.
    - ``include`` adds a ``selectinload`` chain per (dotted) path.
    - ``order_by`` accepts direct mapped columns only.
    - ``skip`` / ``take`` become ``OFFSET`` / ``LIMIT``; ``take(0)`` is
      ``LIMIT 0``.

    Nothing runs until an entity set executes :attr:`statement` or
    :meth:`count_statement`.
    """

    def __init__(
        self,
        model: type[T],
        statement: Select[Any] | None = None,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.model = model
        self.statement: Select[Any] = (
            statement if statement is not None else select(model)
        )
        self._registry = registry

    def _derive(self, statement: Select[Any]) -> SQLAlchemyQuery[T]:
        return SQLAlchemyQuery(self.model, statement, registry=self._registry)

    # -- IQuery ---------------------------------------------------------------

    def where(self, criteria: ICriteria[T]) -> SQLAlchemyQuery[T]:
        clause = build_sqla_filter(
            self.model, criteria.to_dict(), registry=self._registry
        )
        return self._derive(self.statement.where(clause))

    def include(self, path: str) -> SQLAlchemyQuery[T]:
        return self._derive(self.statement.options(_loader_chain(self.model, path)))

    def order_by(self, key: str, *, descending: bool = False) -> SQLAlchemyQuery[T]:
        column = resolve_column(self.model, key)
        return self._derive(
            self.statement.order_by(column.desc() if descending else column.asc())
        )

    def skip(self, count: int) -> SQLAlchemyQuery[T]:
        if count < 0:
            raise InvalidArgumentError(f"skip must be >= 0, got {count}")
        return self._derive(self.statement.offset(count))

    def take(self, count: int) -> SQLAlchemyQuery[T]:
        return self._derive(self.statement.limit(max(count, 0)))

    # -- execution helpers ----------------------------------------------------

    def count_statement(self) -> Select[Any]:
        """``SELECT count(*)`` over the current statement as a subquery."""
        return select(func.count()).select_from(self.statement.subquery())

    def __repr__(self) -> str:
        return f"SQLAlchemyQuery({self.model.__name__}: {self.statement})"


def _loader_chain(model: type[Any], path: str) -> _AbstractLoad:
    """
    Build ``selectinload(Order.lines).selectinload(Line.product)`` for
    ``"lines.product"``.
    """
    option: _AbstractLoad | None = None
    current = model
    for name in path.split("."):
        if not name:
            raise InvalidArgumentError(f"Invalid include path: {path!r}")
        attr, current = resolve_relationship(current, name, full_path=path)
        option = selectinload(attr) if option is None else option.selectinload(attr)
    if option is None:
        raise InvalidArgumentError(f"Invalid include path: {path!r}")
    return option
