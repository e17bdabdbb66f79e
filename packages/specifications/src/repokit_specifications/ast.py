from __future__ import annotations

import dataclasses
import json
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .base import AndCriteria, BaseCriteria, NotCriteria, OrCriteria
from .exceptions import FieldNotFoundError, OperatorNotFoundError, ValidationError
from .operators import CriteriaOperator
from .utils import cast_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repokit_core.domain.specification import ICriteria

    from .strategy import MemoryOperatorRegistry

T = TypeVar("T", contravariant=True)

_VALID_OPERATORS: frozenset[str] = frozenset(m.value for m in CriteriaOperator)
_LOGICAL_OPERATORS: frozenset[str] = frozenset(
    {CriteriaOperator.AND, CriteriaOperator.OR, CriteriaOperator.NOT}
)
_MISSING = object()


class AttributeCriteria(BaseCriteria[T]):
    """
    Criteria checking a single attribute value.

    ``attr`` may be a dotted path.  Crossing a collection on the way
    (``lines.sku`` where ``lines`` is a list) matches when *any* element
    matches, and crossing a missing relation never matches; both mirror the
    ``EXISTS`` semantics of the SQL compiler.

    In-memory evaluation is delegated to an explicitly injected
    :class:`MemoryOperatorRegistry`.
    """

    def __init__(
        self,
        attr: str,
        op: CriteriaOperator | str,
        val: Any = None,
        *,
        registry: MemoryOperatorRegistry,
    ) -> None:
        if registry is None:
            raise ValueError(
                "registry parameter is required. "
                "Use build_default_registry() from operators_memory to create one."
            )
        self.attr = attr
        self.op = _parse_operator(op)
        self.val = val
        self._registry = registry

    def is_satisfied_by(self, candidate: T) -> bool:
        return self._matches(candidate, self.attr)

    def _matches(self, obj: Any, path: str) -> bool:
        if obj is None:
            return False
        head, _, rest = path.partition(".")
        value = _read(obj, head, self.attr)
        if not rest:
            return self._registry.evaluate(self.op, value, self.val)
        if isinstance(value, list | tuple | set):
            return any(self._matches(item, rest) for item in value)
        return self._matches(value, rest)

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op.value, "attr": self.attr, "val": self.val}


def _read(obj: Any, name: str, full_path: str) -> Any:
    """
    Read *name* from *obj*.

    Mappings are schemaless, so a missing key reads as ``None``.  Any other
    object must expose the attribute.

    Raises:
        FieldNotFoundError: If *obj* has no attribute *name*.
    """
    if isinstance(obj, dict):
        return obj.get(name)
    value = getattr(obj, name, _MISSING)
    if value is _MISSING:
        raise FieldNotFoundError(
            name, type(obj).__name__, _field_names(obj), full_path=full_path
        )
    return value


def _field_names(obj: Any) -> list[str]:
    model_fields = getattr(type(obj), "model_fields", None)
    if isinstance(model_fields, dict):
        return list(model_fields)
    if dataclasses.is_dataclass(obj):
        return [f.name for f in dataclasses.fields(obj)]
    return [name for name in getattr(obj, "__dict__", {}) if not name.startswith("_")]


def _parse_operator(op: CriteriaOperator | str) -> CriteriaOperator:
    if isinstance(op, CriteriaOperator):
        return op
    try:
        return CriteriaOperator(op.lower())
    except ValueError:
        raise OperatorNotFoundError(op, sorted(_VALID_OPERATORS)) from None


class CriteriaFactory(Generic[T]):
    """
    Build criteria trees from their dictionary / JSON form.

    The format is the one produced by ``to_dict()``::

        {"op": "and", "conditions": [
            {"op": "=", "attr": "status", "val": "active"},
            {"op": ">", "attr": "total", "val": "100", "value_type": "int"},
        ]}

    ``value_type`` is optional and cast with :func:`cast_value`.  ``not``
    accepts ``conditions`` (a one-element list) or a single ``condition``.
    """

    @staticmethod
    def from_dict(
        data: dict[str, Any],
        *,
        allowed_fields: Sequence[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ICriteria[T]:
        """
        Validate *data* (fail-fast) and build the criteria tree.

        Args:
            data: The criteria dictionary (potentially nested).
            allowed_fields: Optional whitelist of attribute paths.  Any
                ``attr`` outside it raises :class:`ValidationError`.
            registry: Injected into every :class:`AttributeCriteria` leaf.
        """
        errors: list[tuple[str, str]] = []
        _check_node(data, "<root>", allowed_fields, errors, fail_fast=True)
        return _build(data, registry)

    @staticmethod
    def from_json(
        text: str,
        *,
        allowed_fields: Sequence[str] | None = None,
        registry: MemoryOperatorRegistry,
    ) -> ICriteria[T]:
        """Parse a JSON string and build the criteria tree."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON: {exc}", path="<root>") from exc
        if not isinstance(data, dict):
            raise ValidationError(
                "Top-level JSON value must be an object", path="<root>"
            )
        return CriteriaFactory.from_dict(
            data, allowed_fields=allowed_fields, registry=registry
        )

    @staticmethod
    def validate(
        data: Any,
        *,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[str]:
        """Return every problem found in *data*; empty when it is valid."""
        errors: list[tuple[str, str]] = []
        _check_node(data, "<root>", allowed_fields, errors, fail_fast=False)
        return [f"{path}: {message}" for path, message in errors]


# ---------------------------------------------------------------------------
# Internal: recursive build
# ---------------------------------------------------------------------------


def _build(data: dict[str, Any], registry: MemoryOperatorRegistry) -> ICriteria[Any]:
    op = data["op"].lower()

    if op in (CriteriaOperator.AND, CriteriaOperator.OR):
        children = [_build(c, registry) for c in data["conditions"]]
        if op == CriteriaOperator.AND:
            return AndCriteria(*children)
        return OrCriteria(*children)

    if op == CriteriaOperator.NOT:
        conditions = data.get("conditions") or [data["condition"]]
        return NotCriteria(_build(conditions[0], registry))

    val = data.get("val")
    value_type = data.get("value_type")
    if value_type is not None:
        val = cast_value(val, value_type)
    return AttributeCriteria(data["attr"], op, val, registry=registry)


# ---------------------------------------------------------------------------
# Internal: validation
# ---------------------------------------------------------------------------


def _report(
    errors: list[tuple[str, str]], path: str, message: str, *, fail_fast: bool
) -> None:
    if fail_fast:
        raise ValidationError(message, path=path)
    errors.append((path, message))


def _check_node(
    data: Any,
    path: str,
    allowed_fields: Sequence[str] | None,
    errors: list[tuple[str, str]],
    *,
    fail_fast: bool,
) -> None:
    if not isinstance(data, dict):
        _report(
            errors,
            path,
            f"expected a dict, got {type(data).__name__}",
            fail_fast=fail_fast,
        )
        return

    op = data.get("op")
    if not op or not isinstance(op, str):
        _report(errors, path, "missing or empty 'op' key", fail_fast=fail_fast)
        return

    if op.lower() in _LOGICAL_OPERATORS:
        _check_logical(data, op.lower(), path, allowed_fields, errors, fail_fast)
    else:
        _check_leaf(data, op.lower(), path, allowed_fields, errors, fail_fast)


def _check_logical(
    data: dict[str, Any],
    op: str,
    path: str,
    allowed_fields: Sequence[str] | None,
    errors: list[tuple[str, str]],
    fail_fast: bool,
) -> None:
    conditions = data.get("conditions", _MISSING)
    if conditions is _MISSING and op == CriteriaOperator.NOT and "condition" in data:
        _check_node(
            data["condition"], f"{path}.condition", allowed_fields, errors,
            fail_fast=fail_fast,
        )
        return
    if not isinstance(conditions, list):
        _report(
            errors, path, f"logical '{op}' requires a 'conditions' list",
            fail_fast=fail_fast,
        )
        return
    if not conditions:
        _report(
            errors, path, f"logical '{op}' requires at least one condition",
            fail_fast=fail_fast,
        )
        return
    if op == CriteriaOperator.NOT and len(conditions) != 1:
        _report(
            errors, path, "'not' takes exactly one condition", fail_fast=fail_fast
        )
    for idx, child in enumerate(conditions):
        _check_node(
            child, f"{path}.conditions[{idx}]", allowed_fields, errors,
            fail_fast=fail_fast,
        )


def _check_leaf(
    data: dict[str, Any],
    op: str,
    path: str,
    allowed_fields: Sequence[str] | None,
    errors: list[tuple[str, str]],
    fail_fast: bool,
) -> None:
    if op not in _VALID_OPERATORS:
        if fail_fast:
            raise OperatorNotFoundError(op, sorted(_VALID_OPERATORS))
        errors.append((path, f"unknown operator '{op}'"))

    attr = data.get("attr")
    if not attr or not isinstance(attr, str):
        _report(errors, path, "missing 'attr'", fail_fast=fail_fast)
        return

    if allowed_fields is not None and attr not in allowed_fields:
        _report(
            errors, path, f"field '{attr}' is not allowed", fail_fast=fail_fast
        )
