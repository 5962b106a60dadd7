# gpsd_link/__init__.py
"""
Client adapter for the gpsd JSON protocol.

    manager = GpsdManager(load_settings())
    inbox = NotificationQueue()
    conn = manager.create(connect(), inbox)
    conn.send(watch(enable=True, json=True))
"""

from .app.config import GpsdSettings
from .app.loader import SettingsLoader, load_settings
from .interfaces import (
    Connected, ConnectFailed, WriteFailed, Received, ConnectionClosed,
    ConnectionListener, NotificationQueue,
)
from .model import (
    GpsdCommand, GpsdEvent, Unknown,
    version, devices, watch, poll, device, SetWatch,
)
from .protocol import SentenceRegistry, encode_command
from .runtime import GpsdConnection, GpsdManager, ConnectRequest, ConnectionState, connect

__all__ = [
    "GpsdSettings", "SettingsLoader", "load_settings",
    "Connected", "ConnectFailed", "WriteFailed", "Received", "ConnectionClosed",
    "ConnectionListener", "NotificationQueue",
    "GpsdCommand", "GpsdEvent", "Unknown",
    "version", "devices", "watch", "poll", "device", "SetWatch",
    "SentenceRegistry", "encode_command",
    "GpsdConnection", "GpsdManager", "ConnectRequest", "ConnectionState", "connect",
]
