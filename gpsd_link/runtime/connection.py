# gpsd_link/runtime/connection.py
from __future__ import annotations

import itertools
import logging
import queue
import threading
from typing import Any, Callable, Optional, Union

from gpsd_link.app.config import GpsdSettings
from gpsd_link.interfaces.listener import (
    ConnectFailed,
    Connected,
    ConnectionClosed,
    ConnectionListener,
    Notification,
    Received,
    WriteFailed,
)
from gpsd_link.model.base import GpsdCommand
from gpsd_link.protocol.encoder import encode_command
from gpsd_link.protocol.framing import LineFramer
from gpsd_link.protocol.registry import SentenceRegistry
from gpsd_link.transport.base import Transport
from gpsd_link.transport.errors import TransportError, TransportPartialWriteError
from gpsd_link.transport.registry import TransportDriverRegistry

from .request import Address, ConnectRequest
from .state import ConnectionState
from ._internal.messages import CloseRequest, Deliver, PeerClosed, ReadRequest, Send
from ._internal.rx_worker import RxWorker

TransportFactory = Callable[[Address, ConnectRequest], Transport]
Listener = Union[ConnectionListener, Callable[[Notification], None]]

_ids = itertools.count(1)


def tcp_transport_factory(drivers: TransportDriverRegistry) -> TransportFactory:
    def create(remote: Address, request: ConnectRequest) -> Transport:
        return drivers.create(
            "tcp",
            remote,
            local_address=request.local_address,
            options=request.options,
            timeout=request.timeout,
        )
    return create


class GpsdConnection:
    """
    One connection to a gpsd daemon.

    A single worker thread owns the transport and processes one inbox message
    at a time: outbound commands, inbound byte deliveries, read requests and
    close requests. Every outcome reaches the listener as a notification;
    nothing is raised to the consumer.
    """

    def __init__(
        self,
        request: ConnectRequest,
        listener: Listener,
        *,
        registry: Optional[SentenceRegistry] = None,
        settings: Optional[GpsdSettings] = None,
        transport_factory: Optional[TransportFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.request = request
        self.name = f"gpsd-conn-{next(_ids)}"
        self.log = logger or logging.getLogger(__name__)

        self._emit: Callable[[Notification], None] = getattr(listener, "on_notification", listener)
        self._registry = registry or SentenceRegistry.default()
        self._settings = settings or GpsdSettings()
        self._transport_factory = transport_factory or tcp_transport_factory(TransportDriverRegistry.default())

        self._state = ConnectionState.CONNECTING
        self._inbox: "queue.Queue[Any]" = queue.Queue()
        self._framer = LineFramer(logger=self.log)
        self._transport: Optional[Transport] = None
        self._rx: Optional[RxWorker] = None
        self._worker = threading.Thread(target=self._run, name=self.name, daemon=True)

    # ---------------- Consumer API ----------------
    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            raise RuntimeError(f"{self.name} has no transport")
        return self._transport

    @property
    def remote_address(self) -> Address:
        return self.request.remote_address or self._settings.default_address

    def start(self) -> "GpsdConnection":
        self._worker.start()
        return self

    def send(self, command: GpsdCommand) -> None:
        """Queue a command; it is written once connected, in submission order."""
        if not isinstance(command, GpsdCommand):
            raise TypeError(f"not a gpsd command: {command!r}")
        if self._state is ConnectionState.CLOSED:
            self.log.debug("SEND_AFTER_CLOSE conn=%s cmd=%r", self.name, command)
            return
        self.post(Send(command))

    def resume_reading(self) -> None:
        """Pull mode: allow one more read from the transport."""
        self.post(ReadRequest())

    def close(self) -> None:
        self.post(CloseRequest())

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the connection to terminate; True when it has."""
        self._worker.join(timeout)
        return not self._worker.is_alive()

    def is_alive(self) -> bool:
        return self._worker.is_alive()

    def post(self, message: Any) -> None:
        self._inbox.put(message)

    # ---------------- Worker ----------------
    def _run(self) -> None:
        try:
            if self._connect():
                while self._state is ConnectionState.CONNECTED:
                    self._handle(self._inbox.get())
        except Exception:
            self.log.exception("CONNECTION_WORKER_EXCEPTION conn=%s", self.name)
            if self._state is ConnectionState.CONNECTED:
                self._shutdown("internal error")
        finally:
            self._state = ConnectionState.CLOSED
            self._release_transport()

    def _connect(self) -> bool:
        remote = self.remote_address
        self.log.debug("CONNECTING conn=%s remote=%s:%s", self.name, *remote)

        try:
            self._transport = self._transport_factory(remote, self.request)
            self._transport.open()
        except TransportError as e:
            self.log.debug("CONNECT_FAILED conn=%s remote=%s:%s err=%s", self.name, *remote, e)
            return self._connect_failed(str(e))
        except Exception as e:
            self.log.exception("CONNECT_FAILED conn=%s remote=%s:%s", self.name, *remote)
            return self._connect_failed(str(e))

        self._state = ConnectionState.CONNECTED
        info = self._transport.describe()
        self.log.info("CONNECTED conn=%s remote=%s:%s", self.name, *remote)
        self._notify(Connected(remote=info.get("remote", remote), local=info.get("local")))

        self._rx = RxWorker(self, pull_mode=self.request.pull_mode)
        self._rx.start()
        return True

    def _connect_failed(self, error: str) -> bool:
        self._state = ConnectionState.CLOSED
        self._release_transport()
        self._notify(ConnectFailed(request=self.request, error=error))
        return False

    def _handle(self, msg: Any) -> None:
        if isinstance(msg, Deliver):
            self._on_data(msg.data)
        elif isinstance(msg, Send):
            self._on_send(msg.command)
        elif isinstance(msg, ReadRequest):
            if self._rx is not None:
                self._rx.grant_read()
        elif isinstance(msg, CloseRequest):
            self._shutdown("closed")
        elif isinstance(msg, PeerClosed):
            self._shutdown(msg.reason)
        else:
            self.log.warning("UNEXPECTED_MESSAGE conn=%s msg=%r", self.name, msg)

    def _on_send(self, command: GpsdCommand) -> None:
        raw = encode_command(command)
        self.log.debug("SENDING conn=%s raw=%r", self.name, raw)
        try:
            self.transport.write(raw)
        except TransportPartialWriteError as e:
            # a fragment is on the wire; later commands would be corrupted
            self.log.warning("WRITE_FAILED conn=%s cmd=%r err=%s", self.name, command, e)
            self._notify(WriteFailed(command=command, error=str(e)))
            self._shutdown(str(e))
        except TransportError as e:
            self.log.warning("WRITE_FAILED conn=%s cmd=%r err=%s", self.name, command, e)
            self._notify(WriteFailed(command=command, error=str(e)))

    def _on_data(self, data: bytes) -> None:
        self._framer.feed(data)
        while True:
            line = self._framer.get_line()
            if line is None:
                break
            if not line.strip():
                continue
            self._notify(Received(self._registry.parse_line(line)))

    def _shutdown(self, reason: str) -> None:
        self._state = ConnectionState.CLOSED

        if self._rx is not None:
            self._rx.stop()
        self._release_transport()
        if self._rx is not None and self._rx is not threading.current_thread():
            self._rx.join(timeout=1.0)
            self._rx = None

        rest = self._framer.reset()
        if rest:
            self.log.debug("PARTIAL_LINE_DISCARDED conn=%s len=%d", self.name, len(rest))

        self.log.info("CONNECTION_CLOSED conn=%s reason=%s", self.name, reason)
        self._notify(ConnectionClosed(reason=reason))

    def _release_transport(self) -> None:
        transport, self._transport = self._transport, None
        if transport is None:
            return
        try:
            transport.close()
        except Exception:
            self.log.exception("Failed to close transport conn=%s", self.name)

    def _notify(self, notification: Notification) -> None:
        try:
            self._emit(notification)
        except Exception:
            self.log.exception("LISTENER_CALLBACK_ERROR conn=%s kind=%s", self.name, type(notification).__name__)
