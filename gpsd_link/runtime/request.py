# gpsd_link/runtime/request.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from gpsd_link.transport.options import SocketOption

Address = Tuple[str, int]


@dataclass(frozen=True)
class ConnectRequest:
    """
    Request a connection to a gpsd daemon.

    Attributes:
        remote_address: (host, port) to connect to; None uses the configured default.
        local_address: optional (host, port) to bind to.
        options: socket options applied before connecting.
        timeout: connect timeout in seconds; None means no timeout.
        pull_mode: read only when the consumer calls resume_reading().
    """
    remote_address: Optional[Address] = None
    local_address: Optional[Address] = None
    options: Tuple[SocketOption, ...] = ()
    timeout: Optional[float] = None
    pull_mode: bool = False


def connect(
    remote_address: Optional[Address] = None,
    *,
    local_address: Optional[Address] = None,
    options: Iterable[SocketOption] = (),
    timeout: Optional[float] = None,
    pull_mode: bool = False,
) -> ConnectRequest:
    """Build a ConnectRequest; without arguments, connect to the default daemon."""
    return ConnectRequest(
        remote_address=remote_address,
        local_address=local_address,
        options=tuple(options),
        timeout=timeout,
        pull_mode=pull_mode,
    )
