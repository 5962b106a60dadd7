# gpsd_link/transport/__init__.py

from .base import Transport
from .tcp import TcpTransport
from .registry import TransportDriverRegistry
from .errors import (
    TransportError,
    TransportOpenError,
    TransportIOError,
    TransportClosedError,
    TransportPartialWriteError,
)
from .options import (
    SocketOption,
    KeepAlive,
    TcpNoDelay,
    ReuseAddress,
    OOBInline,
    ReceiveBufferSize,
    SendBufferSize,
    TrafficClass,
)

__all__ = [
    "Transport", "TcpTransport", "TransportDriverRegistry",
    "TransportError", "TransportOpenError", "TransportIOError", "TransportClosedError",
    "TransportPartialWriteError",
    "SocketOption", "KeepAlive", "TcpNoDelay", "ReuseAddress", "OOBInline",
    "ReceiveBufferSize", "SendBufferSize", "TrafficClass",
]
