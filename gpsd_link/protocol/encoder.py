from __future__ import annotations

from gpsd_link.model.base import GpsdCommand


def encode_command(command: GpsdCommand) -> bytes:
    """Wire bytes for an outbound command (UTF-8, newline-terminated)."""
    if not isinstance(command, GpsdCommand):
        raise TypeError(f"not a gpsd command: {command!r}")
    return command.wire_text().encode("utf-8")
