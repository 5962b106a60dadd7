from .base import GpsdObject, GpsdCommand, GpsdEvent, Unknown
from .commands import (
    VersionQuery, DevicesQuery, WatchQuery, PollQuery, DeviceQuery, SetWatch,
    VERSION, DEVICES, WATCH, POLL, DEVICE,
    version, devices, watch, poll, device,
)
from .events import (
    FixMode, Version, Devices, Device, Watch, Poll, ErrorReport,
    TPV, SKY, Satellite, GST, ATT, TOFF, PPS, BUILTIN_EVENTS,
)

__all__ = [
    "GpsdObject", "GpsdCommand", "GpsdEvent", "Unknown",
    "VersionQuery", "DevicesQuery", "WatchQuery", "PollQuery", "DeviceQuery", "SetWatch",
    "VERSION", "DEVICES", "WATCH", "POLL", "DEVICE",
    "version", "devices", "watch", "poll", "device",
    "FixMode", "Version", "Devices", "Device", "Watch", "Poll", "ErrorReport",
    "TPV", "SKY", "Satellite", "GST", "ATT", "TOFF", "PPS", "BUILTIN_EVENTS",
]
