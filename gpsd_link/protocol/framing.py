from __future__ import annotations

import logging
from typing import Optional

DEFAULT_MAX_LINE = 1024 * 1024


class LineFramer:
    """
    Splits an inbound byte stream into newline-terminated lines.

    Bytes after the last newline stay buffered until a later feed() completes
    the line, so a sentence split across TCP deliveries is reassembled.
    """

    def __init__(self, max_line: int = DEFAULT_MAX_LINE, logger: Optional[logging.Logger] = None):
        self.max_line = int(max_line)
        self.buffer = bytearray()
        self._scan_from = 0
        self._discarding = False
        self._log = logger or logging.getLogger(__name__)

    # ---------------- Public API ----------------
    def feed(self, data: bytes) -> None:
        """Feed raw bytes into the framer buffer."""
        self.buffer.extend(data)
        self._log.debug(
            "Framer fed %d bytes, buffer_len=%d",
            len(data),
            len(self.buffer),
        )

    def get_line(self) -> Optional[bytes]:
        """Return the next complete line without its terminator, if available."""
        while True:
            idx = self.buffer.find(b"\n", self._scan_from)
            if idx < 0:
                if self._discarding:
                    self.buffer.clear()
                    self._scan_from = 0
                    return None

                self._scan_from = len(self.buffer)
                if len(self.buffer) > self.max_line:
                    self._log.warning(
                        "Line exceeds %d bytes without terminator, dropping %d bytes",
                        self.max_line,
                        len(self.buffer),
                    )
                    self.buffer.clear()
                    self._scan_from = 0
                    # the rest of this line is dropped up to its terminator
                    self._discarding = True
                return None  # Wait for more bytes

            line = bytes(self.buffer[:idx])
            del self.buffer[: idx + 1]
            self._scan_from = 0

            if self._discarding:
                self._discarding = False
                self._log.debug("Resynced after over-long line, dropped tail of %d bytes", len(line))
                continue

            if line.endswith(b"\r"):
                line = line[:-1]
            return line

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet returned as a line."""
        return len(self.buffer)

    @property
    def discarding(self) -> bool:
        """True while the tail of an over-long line is being skipped."""
        return self._discarding

    def reset(self) -> bytes:
        """Discard and return any buffered partial line."""
        rest = bytes(self.buffer)
        self.buffer.clear()
        self._scan_from = 0
        self._discarding = False
        return rest
