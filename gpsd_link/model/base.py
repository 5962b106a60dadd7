# gpsd_link/model/base.py
from __future__ import annotations

import json
from dataclasses import dataclass, fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping


def format_time(dt: datetime) -> str:
    """Render a datetime the way gpsd does: UTC, millisecond precision, 'Z' suffix."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def to_wire(value: Any) -> Any:
    """Convert model values into plain JSON-compatible values, dropping absent members."""
    if isinstance(value, GpsdObject):
        return value.to_wire()
    if is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_wire(getattr(value, f.name))
            for f in fields(value)
            if getattr(value, f.name) is not None
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_time(value)
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


class GpsdObject:
    """
    Common interface for commands and events.
    """

    def to_wire(self) -> Dict[str, Any]:
        if not is_dataclass(self):
            return {}
        return {
            f.name: to_wire(getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def as_json(self) -> str:
        """Serialize this object to compact JSON."""
        return json.dumps(self.to_wire(), separators=(",", ":"))


class GpsdCommand(GpsdObject):
    """
    Outbound request. ``command`` is the literal wire text, newline included.
    """

    command: ClassVar[str]

    def wire_text(self) -> str:
        return self.command


class GpsdEvent(GpsdObject):
    """
    Inbound report or response. ``classifier`` equals the sentence's ``class`` member.
    """

    classifier: ClassVar[str]

    @classmethod
    def from_json(cls, value: Any) -> "GpsdEvent":
        raise NotImplementedError

    def to_wire(self) -> Dict[str, Any]:
        return {"class": self.classifier, **super().to_wire()}


@dataclass(frozen=True)
class Unknown(GpsdObject):
    """
    Any received sentence that could not be classified or decoded.

    ``sentence`` is the parsed JSON value as received (or the raw text when the
    line was not valid JSON).
    """

    sentence: Any

    def to_wire(self) -> Any:  # type: ignore[override]
        return self.sentence

    def __str__(self) -> str:
        if isinstance(self.sentence, str):
            return self.sentence
        return json.dumps(self.sentence, separators=(",", ":"))

    @property
    def declared_class(self) -> Any:
        """The unresolved ``class`` member, if the sentence had one."""
        if isinstance(self.sentence, Mapping):
            return self.sentence.get("class")
        return None
