from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Abstract duplex byte transport (TCP today, anything stream-like tomorrow).

    Contract:
      - open()/close() manage the underlying connection; close() is idempotent.
      - read(n) returns 1..n bytes, or b"" when no data arrived before the read
        timeout. End of stream raises TransportClosedError.
      - write(data) sends all of data and returns the number of bytes written.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def read(self, n: int) -> bytes: ...

    @abstractmethod
    def write(self, data: bytes) -> int: ...

    def describe(self) -> dict:
        """Addresses for logs and the Connected notification."""
        return {}

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
