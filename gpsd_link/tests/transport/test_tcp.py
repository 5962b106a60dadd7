# gpsd_link/tests/transport/test_tcp.py
from __future__ import annotations

import errno
import socket
import sys

import pytest

import gpsd_link.transport.tcp as tcp_mod
from gpsd_link.transport.errors import (
    TransportClosedError,
    TransportIOError,
    TransportOpenError,
    TransportPartialWriteError,
)
from gpsd_link.transport.options import KeepAlive, ReceiveBufferSize, TcpNoDelay, TrafficClass


class FakeSocket:
    def __init__(self, family, socktype, proto):
        self.family = family
        self.socktype = socktype
        self.proto = proto

        self.sockopts = []
        self.bound = None
        self.connected = None
        self.timeouts = []
        self.sent = []
        self.recv_chunks = []

        self.raise_on_connect = None
        self.raise_on_recv = None
        self.raise_on_send = None
        self.send_limit = None

        self.shutdown_called = 0
        self.close_called = 0

    def setsockopt(self, level, name, value):
        self.sockopts.append((level, name, value))

    def bind(self, addr):
        self.bound = addr

    def settimeout(self, t):
        self.timeouts.append(t)

    def connect(self, addr):
        if self.raise_on_connect is not None:
            raise self.raise_on_connect
        self.connected = addr

    def recv(self, n):
        if self.raise_on_recv is not None:
            raise self.raise_on_recv
        if not self.recv_chunks:
            return b""
        return self.recv_chunks.pop(0)

    def send(self, data):
        if self.raise_on_send is not None:
            raise self.raise_on_send
        chunk = bytes(data[: self.send_limit] if self.send_limit is not None else data)
        self.sent.append(chunk)
        return len(chunk)

    def getsockname(self):
        return ("127.0.0.1", 50000)

    def shutdown(self, how):
        self.shutdown_called += 1

    def close(self):
        self.close_called += 1


@pytest.fixture
def fake_net(monkeypatch):
    created = []
    state = {
        "addrs": [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 2947))],
        "fail": [],
        "fail_create": [],
        "writable": [],
    }

    def fake_getaddrinfo(host, port, family=0, type=0, *a):
        return state["addrs"]

    def fake_socket(family, socktype, proto):
        if state["fail_create"]:
            raise state["fail_create"].pop(0)
        s = FakeSocket(family, socktype, proto)
        if state["fail"]:
            s.raise_on_connect = state["fail"].pop(0)
        created.append(s)
        return s

    monkeypatch.setattr(tcp_mod.socket, "getaddrinfo", fake_getaddrinfo)
    def fake_select(r, w, x, timeout):
        ok = state["writable"].pop(0) if state["writable"] else True
        return [], (list(w) if ok else []), []

    monkeypatch.setattr(tcp_mod.socket, "socket", fake_socket)
    monkeypatch.setattr(tcp_mod.select, "select", fake_select)
    return state, created


def test_open_applies_options_binds_and_connects(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport(
        "localhost",
        2947,
        local_address=("0.0.0.0", 0),
        options=(KeepAlive(), TcpNoDelay(False)),
        timeout=3.0,
        read_timeout=0.2,
    )
    t.open()

    s = created[0]
    assert t.is_open() is True
    assert s.connected == ("127.0.0.1", 2947)
    assert s.bound == ("0.0.0.0", 0)
    assert (socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1) in s.sockopts
    assert (socket.IPPROTO_TCP, socket.TCP_NODELAY, 0) in s.sockopts
    # connect timeout first, then the read timeout
    assert s.timeouts == [3.0, 0.2]


def test_open_tries_next_address(fake_net):
    state, created = fake_net
    state["addrs"] = [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 2947, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 2947)),
    ]
    state["fail"] = [ConnectionRefusedError("refused")]

    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()

    assert created[0].close_called == 1
    assert t.sock is created[1]


def test_open_refused_raises_transport_open_error(fake_net):
    state, created = fake_net
    state["fail"] = [ConnectionRefusedError("refused")]

    t = tcp_mod.TcpTransport("localhost", 2947)
    with pytest.raises(TransportOpenError):
        t.open()
    assert t.is_open() is False
    assert created[0].close_called == 1


def test_open_unresolvable_host_raises(monkeypatch):
    def fake_getaddrinfo(*a, **k):
        raise socket.gaierror("no such host")

    monkeypatch.setattr(tcp_mod.socket, "getaddrinfo", fake_getaddrinfo)

    with pytest.raises(TransportOpenError):
        tcp_mod.TcpTransport("nowhere.invalid", 2947).open()


def test_open_socket_creation_error_tries_next_address(fake_net):
    state, created = fake_net
    state["addrs"] = [
        (socket.AF_INET6, socket.SOCK_STREAM, 6, "", ("::1", 2947, 0, 0)),
        (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", 2947)),
    ]
    state["fail_create"] = [OSError(errno.EAFNOSUPPORT, "Address family not supported")]

    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()

    assert len(created) == 1
    assert t.sock is created[0]


def test_open_socket_creation_error_maps_to_open_error(fake_net):
    state, created = fake_net
    state["fail_create"] = [OSError(errno.EMFILE, "Too many open files")]

    t = tcp_mod.TcpTransport("localhost", 2947)
    with pytest.raises(TransportOpenError, match="Too many open files"):
        t.open()
    assert t.is_open() is False


def test_read_returns_data_empty_on_timeout_and_raises_on_eof(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    s = created[0]

    s.recv_chunks = [b"abc"]
    assert t.read(10) == b"abc"

    s.raise_on_recv = socket.timeout()
    assert t.read(10) == b""

    s.raise_on_recv = None
    with pytest.raises(TransportClosedError):
        t.read(10)


def test_read_os_error_maps_to_io_error(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    created[0].raise_on_recv = ConnectionResetError("reset")

    with pytest.raises(TransportIOError):
        t.read(10)


def test_write_sends_all_and_maps_errors(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    s = created[0]

    assert t.write(b"?POLL;\n") == 7
    assert s.sent == [b"?POLL;\n"]

    s.raise_on_send = BrokenPipeError("pipe")
    with pytest.raises(TransportIOError) as ei:
        t.write(b"x")
    assert not isinstance(ei.value, TransportPartialWriteError)


def test_write_loops_over_short_sends(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    s = created[0]
    s.send_limit = 3

    assert t.write(b"?VERSION;\n") == 10
    assert b"".join(s.sent) == b"?VERSION;\n"


def test_write_not_writable_sends_nothing(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947, write_timeout=0.01)
    t.open()
    s = created[0]
    state["writable"] = [False]

    with pytest.raises(TransportIOError, match="send buffer full") as ei:
        t.write(b"?POLL;\n")
    assert not isinstance(ei.value, TransportPartialWriteError)
    assert s.sent == []


def test_write_stall_after_some_bytes_is_partial_write(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947, write_timeout=0.01)
    t.open()
    s = created[0]
    s.send_limit = 2
    state["writable"] = [True, False]

    with pytest.raises(TransportPartialWriteError, match="2/7"):
        t.write(b"?POLL;\n")
    assert s.sent == [b"?P"]


def test_write_error_after_some_bytes_is_partial_write(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    s = created[0]
    s.send_limit = 4

    real_send = s.send

    def send_then_reset(data):
        n = real_send(data)
        s.raise_on_send = ConnectionResetError("reset")
        return n

    s.send = send_then_reset
    with pytest.raises(TransportPartialWriteError):
        t.write(b"?DEVICES;\n")


def _fill(sock) -> int:
    sock.setblocking(False)
    total = 0
    while True:
        try:
            total += sock.send(b"x" * 65536)
        except BlockingIOError:
            return total


def _drain(sock) -> int:
    sock.setblocking(False)
    total = 0
    while True:
        try:
            chunk = sock.recv(65536)
        except BlockingIOError:
            return total
        if not chunk:
            return total
        total += len(chunk)


@pytest.mark.skipif(sys.platform == "win32", reason="relies on AF_UNIX socket buffer accounting")
def test_write_timeout_on_full_socket_leaves_nothing_on_the_wire():
    a, b = socket.socketpair()
    try:
        filled = _fill(a)
        a.settimeout(0.1)

        t = tcp_mod.TcpTransport("localhost", 2947, write_timeout=0.05)
        t.sock = a

        with pytest.raises(TransportIOError) as ei:
            t.write(b"?POLL;\n")
        assert not isinstance(ei.value, TransportPartialWriteError)

        # only the filler is queued, no fragment of the failed command
        assert _drain(b) == filled

        assert t.write(b"?POLL;\n") == 7
        b.settimeout(1.0)
        assert b.recv(64) == b"?POLL;\n"
    finally:
        a.close()
        b.close()


def test_io_when_closed_raises():
    t = tcp_mod.TcpTransport("localhost", 2947)
    with pytest.raises(TransportIOError):
        t.read(1)
    with pytest.raises(TransportIOError):
        t.write(b"x")


def test_close_is_idempotent(fake_net):
    state, created = fake_net
    t = tcp_mod.TcpTransport("localhost", 2947)
    t.open()
    t.close()
    t.close()

    assert created[0].shutdown_called == 1
    assert created[0].close_called == 1
    assert t.is_open() is False


def test_describe_reports_addresses(fake_net):
    t = tcp_mod.TcpTransport("gps.local", 2947)
    assert t.describe() == {"remote": ("gps.local", 2947)}
    t.open()
    assert t.describe() == {"remote": ("gps.local", 2947), "local": ("127.0.0.1", 50000)}


def test_option_validation():
    with pytest.raises(ValueError):
        ReceiveBufferSize(0)
    with pytest.raises(ValueError):
        TrafficClass(256)

    s = FakeSocket(0, 0, 0)
    ReceiveBufferSize(65536).apply(s)
    assert s.sockopts == [(socket.SOL_SOCKET, socket.SO_RCVBUF, 65536)]
