"""
Value helpers shared by the criteria factory and the SQL compiler.

Pure-Python; no infrastructure dependencies.
"""

from __future__ import annotations

import datetime
import decimal
import re
import uuid
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


def parse_list_value(value: Any) -> list[Any]:
    """
    Parse a value into a list.

    Accepts Python collections, comma-separated strings (``"a, b"``) and
    bracketed strings (``"[a, b]"`` or ``"['a', 'b']"``).  Anything else
    becomes a one-element list.
    """
    if isinstance(value, list | tuple | set):
        return list(value)
    if isinstance(value, str):
        content = value.strip()
        if content.startswith("[") and content.endswith("]"):
            content = content[1:-1].strip()
        if not content:
            return []
        return [part.strip().strip("'\"") for part in content.split(",")]
    return [value]


_SHORTHAND_RE = re.compile(r"^(\d+)\s*([wdhms])$", re.IGNORECASE)
_CLOCK_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})$")
_UNITS = {"w": "weeks", "d": "days", "h": "hours", "m": "minutes", "s": "seconds"}


def parse_interval(value: Any) -> datetime.timedelta:
    """
    Parse ``"7d"`` / ``"24h"`` / ``"2w"`` shorthand, ``"HH:MM:SS"`` or a
    plain number of seconds into a ``timedelta``.
    """
    if isinstance(value, datetime.timedelta):
        return value
    text = str(value).strip()

    match = _SHORTHAND_RE.match(text)
    if match:
        amount, unit = int(match.group(1)), match.group(2).lower()
        return datetime.timedelta(**{_UNITS[unit]: amount})

    match = _CLOCK_RE.match(text)
    if match:
        hours, minutes, seconds = map(int, match.groups())
        return datetime.timedelta(hours=hours, minutes=minutes, seconds=seconds)

    try:
        return datetime.timedelta(seconds=float(text))
    except ValueError as err:
        raise ValueError(f"Unrecognised interval format: {value!r}") from err


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def _to_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    return datetime.date.fromisoformat(str(value)[:10])


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, datetime.time):
        return value
    return datetime.time.fromisoformat(str(value))


def _to_uuid(value: Any) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


_CASTERS: dict[str, Callable[[Any], Any]] = {
    "str": str,
    "string": str,
    "text": str,
    "int": int,
    "integer": int,
    "float": float,
    "decimal": lambda v: decimal.Decimal(str(v)),
    "bool": _to_bool,
    "boolean": _to_bool,
    "date": _to_date,
    "datetime": _to_datetime,
    "time": _to_time,
    "interval": parse_interval,
    "uuid": _to_uuid,
    "list": parse_list_value,
}


def cast_value(value: Any, value_type: str | None = None) -> Any:
    """
    Cast *value* to the Python type named by *value_type*.

    Lists are cast item by item (except for ``value_type="list"``).  An
    unknown or missing *value_type* returns the value unchanged, as does
    ``None``.

    Raises:
        ValueError: If the value cannot be represented as *value_type*.
    """
    if value is None or value_type is None:
        return value
    vt = value_type.strip().lower()
    caster = _CASTERS.get(vt)
    if caster is None:
        return value
    if isinstance(value, list | tuple) and vt != "list":
        return [cast_value(item, vt) for item in value]
    try:
        return caster(value)
    except (TypeError, ValueError, decimal.InvalidOperation) as err:
        raise ValueError(f"Cannot cast {value!r} to {value_type!r}") from err
