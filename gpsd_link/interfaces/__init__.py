from .listener import (
    Connected,
    ConnectFailed,
    WriteFailed,
    Received,
    ConnectionClosed,
    Notification,
    ConnectionListener,
    NotificationQueue,
)

__all__ = [
    "Connected", "ConnectFailed", "WriteFailed", "Received", "ConnectionClosed",
    "Notification", "ConnectionListener", "NotificationQueue",
]
