# gpsd_link/runtime/__init__.py

from .connection import GpsdConnection
from .manager import GpsdManager
from .request import ConnectRequest, connect
from .state import ConnectionState

__all__ = [
    "GpsdConnection", "GpsdManager",
    "ConnectRequest", "connect",
    "ConnectionState",
]
