# gpsd_link/transport/tcp.py
from __future__ import annotations

import select
import socket
from typing import Iterable, Optional, Tuple

from .base import Transport
from .errors import TransportClosedError, TransportIOError, TransportOpenError, TransportPartialWriteError
from .options import SocketOption

Address = Tuple[str, int]


class TcpTransport(Transport):
    """
    TCP transport implemented via the socket module.

    read(n) waits at most read_timeout seconds and returns b"" on timeout so
    the reader loop can notice a stop request.

    write(data) is all-or-nothing as far as the caller can tell: when the
    send buffer stays full for write_timeout seconds before the first byte
    goes out, TransportIOError is raised and nothing was written. A stall
    after some bytes were sent raises TransportPartialWriteError.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        local_address: Optional[Address] = None,
        options: Iterable[SocketOption] = (),
        timeout: Optional[float] = None,
        read_timeout: float = 0.1,
        write_timeout: float = 1.0,
    ):
        self.host = host
        self.port = int(port)
        self.local_address = local_address
        self.options = tuple(options)
        self.timeout = timeout
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.sock: Optional[socket.socket] = None

    def open(self) -> None:
        try:
            infos = socket.getaddrinfo(self.host, self.port, 0, socket.SOCK_STREAM)
        except OSError as e:
            raise TransportOpenError(f"could not resolve {self.host}:{self.port}: {e}") from None

        last_error: Optional[OSError] = None
        for family, socktype, proto, _canon, sockaddr in infos:
            sock: Optional[socket.socket] = None
            try:
                sock = socket.socket(family, socktype, proto)
                for opt in self.options:
                    opt.apply(sock)
                if self.local_address is not None:
                    sock.bind(self.local_address)
                sock.settimeout(self.timeout)
                sock.connect(sockaddr)
            except OSError as e:
                last_error = e
                if sock is not None:
                    sock.close()
                continue

            sock.settimeout(self.read_timeout)
            self.sock = sock
            return

        raise TransportOpenError(f"could not connect to {self.host}:{self.port}: {last_error}") from None

    def close(self) -> None:
        if self.sock is not None:
            try:
                try:
                    self.sock.shutdown(socket.SHUT_RDWR)
                except OSError:
                    # already disconnected
                    pass
                self.sock.close()
            finally:
                self.sock = None

    def is_open(self) -> bool:
        return self.sock is not None

    def read(self, n: int) -> bytes:
        sock = self.sock
        if sock is None:
            raise TransportIOError("read while transport not open")

        try:
            data = sock.recv(n)
        except socket.timeout:
            return b""
        except OSError as e:
            raise TransportIOError(f"TCP read failed: {e}") from None

        if not data:
            raise TransportClosedError(f"{self.host}:{self.port} closed the connection")
        return data

    def write(self, data: bytes) -> int:
        sock = self.sock
        if sock is None:
            raise TransportIOError("write while transport not open")

        view = memoryview(data)
        sent = 0
        while sent < len(view):
            try:
                if not self._wait_writable(sock):
                    raise socket.timeout()
                sent += sock.send(view[sent:])
            except OSError as e:
                # socket.timeout included
                if sent:
                    raise TransportPartialWriteError(f"TCP write stalled after {sent}/{len(view)} bytes") from None
                if isinstance(e, socket.timeout):
                    raise TransportIOError("TCP write timed out (send buffer full)") from None
                raise TransportIOError(f"TCP write failed: {e}") from None
        return sent

    def _wait_writable(self, sock: socket.socket) -> bool:
        _, writable, _ = select.select([], [sock], [], self.write_timeout)
        return bool(writable)

    def describe(self) -> dict:
        out = {"remote": (self.host, self.port)}
        if self.sock is not None:
            try:
                out["local"] = self.sock.getsockname()[:2]
            except OSError:
                pass
        return out
