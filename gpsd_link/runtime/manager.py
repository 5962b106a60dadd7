# gpsd_link/runtime/manager.py
from __future__ import annotations

import logging
import threading
from typing import List, Optional

from gpsd_link.app.config import GpsdSettings
from gpsd_link.protocol.registry import SentenceRegistry
from gpsd_link.transport.registry import TransportDriverRegistry

from .connection import GpsdConnection, Listener, TransportFactory, tcp_transport_factory
from .request import ConnectRequest


class GpsdManager:
    """
    Creates one isolated GpsdConnection per connect request.

    The sentence registry is frozen on construction and shared read-only by
    every connection. A failing connection only notifies its own listener.
    """

    def __init__(
        self,
        settings: Optional[GpsdSettings] = None,
        *,
        registry: Optional[SentenceRegistry] = None,
        drivers: Optional[TransportDriverRegistry] = None,
        transport_factory: Optional[TransportFactory] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.settings = settings or GpsdSettings()
        self._log = logger or logging.getLogger(__name__)

        if registry is None:
            registry = (
                SentenceRegistry.from_mapping(self.settings.sentences, base=SentenceRegistry.default())
                if self.settings.sentences
                else SentenceRegistry.default()
            )
        self.registry = registry.freeze()

        self._transport_factory = transport_factory or tcp_transport_factory(
            drivers or TransportDriverRegistry.default()
        )

        self._lock = threading.Lock()
        self._connections: List[GpsdConnection] = []

    def create(self, request: ConnectRequest, listener: Listener) -> GpsdConnection:
        """Start a new connection; its outcome is reported to ``listener``."""
        conn = GpsdConnection(
            request,
            listener,
            registry=self.registry,
            settings=self.settings,
            transport_factory=self._transport_factory,
            logger=self._log,
        )
        with self._lock:
            self._connections = [c for c in self._connections if c.is_alive()]
            self._connections.append(conn)

        conn.start()
        self._log.debug("CONNECTION_CREATED conn=%s pull_mode=%s", conn.name, request.pull_mode)
        return conn

    def connections(self) -> List[GpsdConnection]:
        with self._lock:
            return [c for c in self._connections if c.is_alive()]

    def shutdown(self, timeout: float = 2.0) -> None:
        """Close every live connection and wait for them to terminate."""
        conns = self.connections()
        for conn in conns:
            conn.close()
        for conn in conns:
            if not conn.join(timeout):
                self._log.warning("CONNECTION_JOIN_TIMEOUT conn=%s", conn.name)

    def __enter__(self) -> "GpsdManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
