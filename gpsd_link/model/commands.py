# gpsd_link/model/commands.py
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .base import GpsdCommand


@dataclass(frozen=True)
class VersionQuery(GpsdCommand):
    """Request the version object."""
    command: ClassVar[str] = "?VERSION;\n"


@dataclass(frozen=True)
class DevicesQuery(GpsdCommand):
    """Request a device list object."""
    command: ClassVar[str] = "?DEVICES;\n"


@dataclass(frozen=True)
class WatchQuery(GpsdCommand):
    """Request the watch status."""
    command: ClassVar[str] = "?WATCH;\n"


@dataclass(frozen=True)
class PollQuery(GpsdCommand):
    """
    Request data from the last-seen fixes on all active devices.

    Devices must previously have been activated by ?WATCH to be pollable.
    The response may be as much as one cycle time (typically 1 second) stale.
    """
    command: ClassVar[str] = "?POLL;\n"


@dataclass(frozen=True)
class DeviceQuery(GpsdCommand):
    """Request the state of a device."""
    command: ClassVar[str] = "?DEVICE;\n"


@dataclass(frozen=True)
class SetWatch(GpsdCommand):
    """
    Set watcher mode and per-subscriber policy.

    In watcher mode with ``json`` enabled, reports are streamed as TPV and SKY
    sentences; with ``json`` left unset the daemon keeps its current choice.
    """

    enable: bool
    json: Optional[bool] = None

    @property
    def command(self) -> str:  # type: ignore[override]
        return "?WATCH=" + self.as_json() + "\n"


VERSION = VersionQuery()
DEVICES = DevicesQuery()
WATCH = WatchQuery()
POLL = PollQuery()
DEVICE = DeviceQuery()


def version() -> GpsdCommand:
    return VERSION


def devices() -> GpsdCommand:
    return DEVICES


def watch(enable: Optional[bool] = None, json: Optional[bool] = None) -> GpsdCommand:
    """Without arguments, query the watch policy; otherwise set it."""
    if enable is None:
        if json is not None:
            raise ValueError("json requires enable")
        return WATCH
    return SetWatch(enable=bool(enable), json=json)


def poll() -> GpsdCommand:
    return POLL


def device() -> GpsdCommand:
    return DEVICE
