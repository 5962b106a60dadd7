# gpsd_link/runtime/_internal/rx_worker.py
from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from gpsd_link.transport.errors import TransportClosedError, TransportError

from .messages import Deliver, PeerClosed

if TYPE_CHECKING:
    from gpsd_link.runtime.connection import GpsdConnection


class RxWorker(threading.Thread):
    """
    Thread that reads from the transport and posts deliveries into the
    connection inbox.

    In pull mode each read waits for a permit granted by the connection
    (one per resume_reading() request); an empty read keeps the permit.
    """

    def __init__(self, conn: "GpsdConnection", *, pull_mode: bool = False, chunk_size: int = 4096):
        super().__init__(daemon=True, name=f"{conn.name}-rx")
        self.conn = conn
        self.transport = conn.transport
        self.pull_mode = pull_mode
        self.chunk_size = int(chunk_size)
        self._stop_event = threading.Event()
        self._permits = threading.Semaphore(0)

    def run(self) -> None:
        have_permit = not self.pull_mode
        while not self._stop_event.is_set():
            if not have_permit:
                have_permit = self._permits.acquire(timeout=0.05)
                continue

            try:
                data = self.transport.read(self.chunk_size)
            except TransportClosedError:
                if not self._stop_event.is_set():
                    self.conn.post(PeerClosed("peer_closed"))
                return
            except TransportError as e:
                if not self._stop_event.is_set():
                    self.conn.post(PeerClosed(str(e)))
                return
            except Exception:
                self.conn.log.exception("RX_WORKER_EXCEPTION conn=%s", self.conn.name)
                self._stop_event.wait(0.01)
                continue

            if data:
                self.conn.post(Deliver(data))
                if self.pull_mode:
                    have_permit = False

    def grant_read(self) -> None:
        self._permits.release()

    def stop(self) -> None:
        self._stop_event.set()
