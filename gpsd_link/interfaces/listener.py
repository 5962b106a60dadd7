# gpsd_link/interfaces/listener.py
from __future__ import annotations

import queue
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol, Tuple, Union

from gpsd_link.model.base import GpsdCommand, GpsdEvent, Unknown

if TYPE_CHECKING:
    from gpsd_link.runtime.request import ConnectRequest


@dataclass(frozen=True)
class Connected:
    remote: Optional[Tuple[str, int]] = None
    local: Optional[Tuple[str, int]] = None


@dataclass(frozen=True)
class ConnectFailed:
    request: "ConnectRequest"
    error: str


@dataclass(frozen=True)
class WriteFailed:
    """The command was not written; the connection stays open."""
    command: GpsdCommand
    error: str


@dataclass(frozen=True)
class Received:
    event: Union[GpsdEvent, Unknown]


@dataclass(frozen=True)
class ConnectionClosed:
    reason: str  # "closed" | "peer_closed" | transport error text


Notification = Union[Connected, ConnectFailed, WriteFailed, Received, ConnectionClosed]


class ConnectionListener(Protocol):
    def on_notification(self, notification: Notification) -> None: ...


class NotificationQueue:
    """
    ConnectionListener that buffers notifications for a consumer thread.
    """

    def __init__(self, maxsize: int = 0):
        self._queue: "queue.Queue[Notification]" = queue.Queue(maxsize=maxsize)

    def on_notification(self, notification: Notification) -> None:
        # blocks when bounded and full; backpressure reaches the connection worker
        self._queue.put(notification)

    def get(self, timeout: Optional[float] = None) -> Notification:
        """Block until the next notification; raises queue.Empty on timeout."""
        return self._queue.get(timeout=timeout)

    def try_get(self, timeout: float = 0.1) -> Optional[Notification]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[Any]:
        out = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out
