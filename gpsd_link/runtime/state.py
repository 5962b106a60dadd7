# gpsd_link/runtime/state.py
from __future__ import annotations

from enum import Enum


class ConnectionState(Enum):
    """
    Lifecycle of a GpsdConnection: CONNECTING -> CONNECTED -> CLOSED,
    or CONNECTING -> CLOSED when the connect fails.
    """
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"
