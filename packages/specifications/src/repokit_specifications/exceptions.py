"""
Errors raised while building, parsing or compiling criteria.

Every class here is an ``InvalidArgumentError``: the caller handed over a
query that cannot be executed.  ``to_dict()`` gives a payload suitable for
an API error response; ``code`` is its stable ``"error"`` value.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any, ClassVar

from repokit_core.primitives.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from collections.abc import Iterable

_FIELD_PREVIEW = 15


def _suggest(
    word: str, choices: Iterable[str], *, n: int = 3, cutoff: float = 0.6
) -> list[str]:
    return get_close_matches(word, list(choices), n=n, cutoff=cutoff)


def _preview(names: Iterable[str], limit: int = _FIELD_PREVIEW) -> str:
    ordered = sorted(names)
    text = ", ".join(ordered[:limit])
    return f"{text}, ..." if len(ordered) > limit else text


class SpecificationError(InvalidArgumentError):
    """Base class; ``details()`` extends the payload in subclasses."""

    code: ClassVar[str] = "SPECIFICATION_ERROR"

    def details(self) -> dict[str, Any]:
        return {"message": str(self)}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, **self.details()}


class ValidationError(SpecificationError):
    """A criteria tree or specification is malformed.

    ``path`` locates the offending node, e.g. ``<root>.conditions[1]``.
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def details(self) -> dict[str, Any]:
        return {"message": self.message, "path": self.path}


class OperatorNotFoundError(SpecificationError):
    """The operator is unknown, or the active registry does not support it."""

    code = "OPERATOR_NOT_FOUND"

    def __init__(self, operator: str, valid_operators: Iterable[str]) -> None:
        self.operator = operator
        self.valid_operators = sorted(valid_operators)
        self.suggestions = _suggest(operator, self.valid_operators)

        parts = [f"Unknown operator: '{operator}'."]
        if self.suggestions:
            parts.append(f"Did you mean: {', '.join(self.suggestions)}?")
        parts.append(f"Valid operators: {_preview(self.valid_operators, 10)}")
        super().__init__(" ".join(parts))

    def details(self) -> dict[str, Any]:
        return {
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": self.valid_operators,
        }


class _FieldError(SpecificationError):
    """Shared state for errors about one attribute of one model."""

    def __init__(
        self,
        message: str,
        field: str,
        model_name: str,
        full_path: str | None,
    ) -> None:
        super().__init__(message)
        self.field = field
        self.model_name = model_name
        self.full_path = full_path or field

    def details(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "model": self.model_name,
            "full_path": self.full_path,
        }


class FieldNotFoundError(_FieldError):
    """
    The model has no attribute of that name.

    The message lists close matches and a preview of the valid fields::

        Invalid field 'nmae' on 'Customer'.
        Did you mean one of these?
          • name
        Available fields: id, name, orders
    """

    code = "FIELD_NOT_FOUND"

    def __init__(
        self,
        invalid_field: str,
        model_name: str,
        available_fields: Iterable[str],
        full_path: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.available_fields = sorted(available_fields)
        self.suggestions = _suggest(
            invalid_field, self.available_fields, n=5, cutoff=cutoff
        )

        lines = [f"Invalid field '{invalid_field}' on '{model_name}'."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            lines.extend(f"  • {name}" for name in self.suggestions)
        lines.append(f"Available fields: {_preview(self.available_fields)}")
        super().__init__("\n".join(lines), invalid_field, model_name, full_path)

    @property
    def invalid_field(self) -> str:
        return self.field

    def details(self) -> dict[str, Any]:
        return {
            **super().details(),
            "suggestions": self.suggestions,
            "available_fields": self.available_fields,
        }


class RelationshipTraversalError(ValidationError):
    """A dotted path steps through something that is not a relationship."""

    code = "RELATIONSHIP_TRAVERSAL_ERROR"

    def __init__(
        self, field: str, model_name: str, full_path: str | None = None
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.full_path = full_path or field
        super().__init__(
            f"Cannot traverse '{field}' on '{model_name}': it is not a "
            f"relationship (path '{self.full_path}')",
            path=full_path,
        )

    def details(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "model": self.model_name,
            "full_path": self.full_path,
        }


class FieldNotQueryableError(ValidationError):
    """The attribute exists but is neither a mapped column nor a relationship."""

    code = "FIELD_NOT_QUERYABLE"

    def __init__(
        self,
        field: str,
        model_name: str,
        available_fields: Iterable[str],
        full_path: str | None = None,
    ) -> None:
        self.field = field
        self.model_name = model_name
        self.available_fields = sorted(available_fields)
        self.full_path = full_path or field
        self.suggestions = _suggest(field, self.available_fields)

        message = (
            f"'{field}' on '{model_name}' is not queryable: only mapped "
            f"columns and relationships can be (path '{self.full_path}')"
        )
        if self.suggestions:
            message += f"\nDid you mean: {', '.join(self.suggestions)}?"
        super().__init__(message, path=full_path)

    def details(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "model": self.model_name,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": self.available_fields,
        }
