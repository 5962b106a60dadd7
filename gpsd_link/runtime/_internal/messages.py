# gpsd_link/runtime/_internal/messages.py
"""Inbox messages of a connection worker; processed strictly in arrival order."""

from __future__ import annotations

from dataclasses import dataclass

from gpsd_link.model.base import GpsdCommand


@dataclass(frozen=True)
class Send:
    command: GpsdCommand


@dataclass(frozen=True)
class Deliver:
    data: bytes


@dataclass(frozen=True)
class ReadRequest:
    pass


@dataclass(frozen=True)
class CloseRequest:
    pass


@dataclass(frozen=True)
class PeerClosed:
    reason: str
