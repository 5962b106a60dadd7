# gpsd_link/transport/options.py
from __future__ import annotations

import socket
from dataclasses import dataclass


class SocketOption:
    """
    A transport-level option applied to the socket before connecting.
    """

    def apply(self, sock: socket.socket) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class KeepAlive(SocketOption):
    on: bool = True

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, int(self.on))


@dataclass(frozen=True)
class TcpNoDelay(SocketOption):
    on: bool = True

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, int(self.on))


@dataclass(frozen=True)
class ReuseAddress(SocketOption):
    on: bool = True

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, int(self.on))


@dataclass(frozen=True)
class OOBInline(SocketOption):
    on: bool = True

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_OOBINLINE, int(self.on))


@dataclass(frozen=True)
class ReceiveBufferSize(SocketOption):
    size: int

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"ReceiveBufferSize must be > 0, got {self.size}")

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, self.size)


@dataclass(frozen=True)
class SendBufferSize(SocketOption):
    size: int

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"SendBufferSize must be > 0, got {self.size}")

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDBUF, self.size)


@dataclass(frozen=True)
class TrafficClass(SocketOption):
    """IP type-of-service byte (IPv4 only)."""
    tc: int

    def __post_init__(self) -> None:
        if not 0 <= self.tc <= 255:
            raise ValueError(f"TrafficClass must be within 0..255, got {self.tc}")

    def apply(self, sock: socket.socket) -> None:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_TOS, self.tc)
