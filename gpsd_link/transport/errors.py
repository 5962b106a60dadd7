# gpsd_link/transport/errors.py
from __future__ import annotations

class TransportError(Exception):
    """Base class for transport-layer failures."""

class TransportOpenError(TransportError):
    pass

class TransportIOError(TransportError):
    pass

class TransportClosedError(TransportError):
    """The peer closed the connection (end of stream)."""

class TransportPartialWriteError(TransportIOError):
    """Only part of a write reached the wire; the outbound stream is no longer usable."""
