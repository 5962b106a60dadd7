# gpsd_link/model/fields.py
"""
Typed access to members of a decoded JSON object.

Every getter raises DecodeError on a type mismatch. The ``opt_*`` getters
return None for a missing (or JSON null) member; the ``req_*`` getters
raise DecodeError instead.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, TypeVar

from gpsd_link.core.errors import DecodeError

T = TypeVar("T")

_MISSING = object()

# 2024-01-01T00:00:00.000Z, optional fraction, Z or +hh:mm offset
_ISO_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:?\d{2})?$"
)


def as_object(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(
            f"{what} must be a JSON object, got {type(value).__name__}",
            details={"value": value},
        )
    return value


def _get(obj: Mapping[str, Any], name: str) -> Any:
    v = obj.get(name, _MISSING)
    return _MISSING if v is None else v


def _mismatch(name: str, expected: str, value: Any) -> DecodeError:
    return DecodeError(
        f"member '{name}' must be {expected}, got {type(value).__name__}",
        details={"member": name, "value": value},
    )


def _missing(name: str) -> DecodeError:
    return DecodeError(f"required member '{name}' missing", details={"member": name})


def _check_str(name: str, v: Any) -> str:
    if not isinstance(v, str):
        raise _mismatch(name, "a string", v)
    return v


def _check_int(name: str, v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise _mismatch(name, "an integer", v)
    return v


def _check_float(name: str, v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise _mismatch(name, "a number", v)
    return float(v)


def _check_bool(name: str, v: Any) -> bool:
    if not isinstance(v, bool):
        raise _mismatch(name, "a boolean", v)
    return v


def parse_time(text: str) -> datetime:
    """Parse a gpsd ISO-8601 timestamp into an aware UTC datetime."""
    m = _ISO_RE.match(text.strip())
    if not m:
        raise ValueError(f"not an ISO-8601 timestamp: {text!r}")

    date_part, time_part, frac, tz = m.groups()
    micros = (frac or "0")[:6].ljust(6, "0")
    if tz is None or tz == "Z":
        tz = "+00:00"
    elif ":" not in tz:
        tz = tz[:3] + ":" + tz[3:]

    dt = datetime.fromisoformat(f"{date_part}T{time_part}.{micros}{tz}")
    return dt.astimezone(timezone.utc)


def _check_time(name: str, v: Any) -> datetime:
    if not isinstance(v, str):
        raise _mismatch(name, "an ISO-8601 string", v)
    try:
        return parse_time(v)
    except ValueError as e:
        raise DecodeError(str(e), details={"member": name, "value": v}) from None


def _required(check: Callable[[str, Any], T]) -> Callable[[Mapping[str, Any], str], T]:
    def getter(obj: Mapping[str, Any], name: str) -> T:
        v = _get(obj, name)
        if v is _MISSING:
            raise _missing(name)
        return check(name, v)
    return getter


def _optional(check: Callable[[str, Any], T]) -> Callable[[Mapping[str, Any], str], Optional[T]]:
    def getter(obj: Mapping[str, Any], name: str) -> Optional[T]:
        v = _get(obj, name)
        if v is _MISSING:
            return None
        return check(name, v)
    return getter


req_str = _required(_check_str)
opt_str = _optional(_check_str)
req_int = _required(_check_int)
opt_int = _optional(_check_int)
req_float = _required(_check_float)
opt_float = _optional(_check_float)
req_bool = _required(_check_bool)
opt_bool = _optional(_check_bool)
req_time = _required(_check_time)
opt_time = _optional(_check_time)


def req_list(obj: Mapping[str, Any], name: str, item: Callable[[Any], T]) -> List[T]:
    v = _get(obj, name)
    if v is _MISSING:
        raise _missing(name)
    if not isinstance(v, list):
        raise _mismatch(name, "a list", v)
    return [item(x) for x in v]


def opt_list(obj: Mapping[str, Any], name: str, item: Callable[[Any], T]) -> List[T]:
    """Like req_list, but a missing member is an empty list."""
    if _get(obj, name) is _MISSING:
        return []
    return req_list(obj, name, item)


def epoch_seconds(dt: Optional[datetime]) -> Optional[float]:
    """Seconds since the Unix epoch, or None when the time was not reported."""
    return dt.timestamp() if dt is not None else None
