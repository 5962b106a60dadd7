# gpsd_link/transport/registry.py
from __future__ import annotations

from typing import Dict, Iterable, Tuple, Type

from .base import Transport
from .errors import TransportError
from .tcp import TcpTransport

Address = Tuple[str, int]


class TransportDriverRegistry:
    """
    Driver key (case-insensitive) -> transport class taking ``(host, port, **params)``.

    The connection only knows driver keys; this is the one place that maps
    them onto concrete classes.
    """

    def __init__(self, drivers: Dict[str, Type[Transport]]):
        self._drivers: Dict[str, Type[Transport]] = {}
        for key, transport_cls in drivers.items():
            self.register(key, transport_cls)

    @classmethod
    def default(cls) -> "TransportDriverRegistry":
        return cls({"tcp": TcpTransport})

    def register(self, driver: str, transport_cls: Type[Transport]) -> None:
        if not (isinstance(transport_cls, type) and issubclass(transport_cls, Transport)):
            raise TypeError(f"{transport_cls!r} is not a Transport subclass")
        self._drivers[driver.lower()] = transport_cls

    def drivers(self) -> Iterable[str]:
        return sorted(self._drivers)

    def has(self, driver: str) -> bool:
        return driver.lower() in self._drivers

    def get_class(self, driver: str) -> Type[Transport]:
        try:
            return self._drivers[driver.lower()]
        except KeyError:
            raise TransportError(
                f"Transport driver '{driver}' not registered (known: {', '.join(self.drivers()) or '-'})"
            ) from None

    def create(self, driver: str, remote: Address, **params) -> Transport:
        """Instantiate the driver's transport for a (host, port) address."""
        host, port = remote
        return self.get_class(driver)(host, port, **params)
