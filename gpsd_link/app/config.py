# gpsd_link/app/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_HOSTNAME = "localhost"
DEFAULT_PORT = 2947


@dataclass(frozen=True)
class GpsdSettings:
    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    # classifier -> decoder reference, in file order
    sentences: Mapping[str, str] = field(default_factory=dict)

    @property
    def default_address(self) -> tuple[str, int]:
        return (self.hostname, self.port)
