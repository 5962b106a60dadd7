# gpsd_link/cli/commands.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple, Type

from gpsd_link.app.loader import load_settings
from gpsd_link.core.errors import SessionError
from gpsd_link.interfaces import (
    ConnectFailed,
    Connected,
    ConnectionClosed,
    NotificationQueue,
    Received,
    WriteFailed,
)
from gpsd_link.model import (
    Devices,
    ErrorReport,
    GpsdEvent,
    Poll,
    Unknown,
    Version,
    devices,
    poll,
    version,
    watch,
)
from gpsd_link.runtime import GpsdConnection, GpsdManager, connect

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ---------------- Logging ----------------

def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """
    Send log records to stderr and, optionally, to a file (idempotent).
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(sh)

    if log_file is None:
        return

    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    target = str(path.resolve())
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(path, encoding="utf-8", delay=True)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)


# ---------------- Printing ----------------

def format_event(event) -> str:
    if isinstance(event, Unknown):
        return f"UNKNOWN {event}"
    return f"{event.classifier} {event.as_json()}"


def print_version(v: Version) -> None:
    print(f"gpsd {v.release} (rev {v.rev}), protocol {v.proto_major}.{v.proto_minor}")
    if v.remote:
        print(f"remote: {v.remote}")


def print_devices(d: Devices) -> None:
    if not d.devices:
        print("Devices: (none)")
        return
    print("Devices:")
    for dev in d.devices:
        state = "active" if dev.activated is not None else "inactive"
        driver = dev.driver or "-"
        bps = dev.bps if dev.bps is not None else "-"
        print(f"  - path={dev.path or '-'} driver={driver} bps={bps} {state}")


def print_poll(p: Poll) -> None:
    print(f"Poll at {p.time.isoformat()} active={p.active}")
    for fix in p.tpv:
        pos = "-" if fix.lat is None else f"{fix.lat:.6f},{fix.lon:.6f}"
        alt = "-" if fix.alt is None else f"{fix.alt:.1f}m"
        print(f"  TPV device={fix.device or '-'} mode={fix.mode.name} pos={pos} alt={alt}")
    for sky in p.sky:
        used = sum(1 for s in sky.satellites if s.used)
        print(f"  SKY device={sky.device or '-'} satellites={len(sky.satellites)} used={used}")


# ---------------- Session helpers ----------------

@contextmanager
def open_session(args, *, pull_mode: bool = False) -> Iterator[Tuple[GpsdConnection, NotificationQueue]]:
    """
    Connect to gpsd and yield (connection, inbox) once Connected was received.
    The connection is closed on exit.
    """
    settings = load_settings(args.config)
    host = args.host or settings.hostname
    port = args.port or settings.port

    inbox = NotificationQueue()
    with GpsdManager(settings) as manager:
        conn = manager.create(
            connect((host, port), timeout=args.connect_timeout, pull_mode=pull_mode),
            inbox,
        )

        first = inbox.try_get(timeout=args.connect_timeout + 1.0)
        if isinstance(first, ConnectFailed):
            raise SessionError(
                f"Cannot connect to gpsd at {host}:{port}",
                hint="Is gpsd running? Check --host/--port.",
                details={"error": first.error},
            )
        if not isinstance(first, Connected):
            raise SessionError(f"No answer from {host}:{port} within {args.connect_timeout}s")

        yield conn, inbox


def wait_for(
    inbox: NotificationQueue,
    kind: Type[GpsdEvent],
    timeout: float,
) -> GpsdEvent:
    """Return the first received event of ``kind``; other events are skipped."""
    deadline = time.monotonic() + timeout
    while True:
        left = deadline - time.monotonic()
        if left <= 0:
            raise SessionError(f"No {kind.classifier} reply within {timeout}s")

        n = inbox.try_get(timeout=min(left, 0.2))
        if n is None:
            continue

        if isinstance(n, Received):
            if isinstance(n.event, kind):
                return n.event
            if isinstance(n.event, ErrorReport):
                raise SessionError(f"gpsd reported an error: {n.event.message}")
        elif isinstance(n, WriteFailed):
            raise SessionError(f"Failed to send {n.command!r}", details={"error": n.error})
        elif isinstance(n, ConnectionClosed):
            raise SessionError(f"Connection closed before {kind.classifier} reply", details={"reason": n.reason})


# ---------------- Commands ----------------

def cmd_version(args) -> int:
    with open_session(args) as (conn, inbox):
        conn.send(version())
        print_version(wait_for(inbox, Version, args.timeout))
    return 0


def cmd_devices(args) -> int:
    with open_session(args) as (conn, inbox):
        conn.send(devices())
        print_devices(wait_for(inbox, Devices, args.timeout))
    return 0


def cmd_poll(args) -> int:
    with open_session(args) as (conn, inbox):
        # devices must be watched to be pollable
        conn.send(watch(enable=True))
        conn.send(poll())
        print_poll(wait_for(inbox, Poll, args.timeout))
    return 0


def cmd_watch(args) -> int:
    classes: Sequence[str] = tuple(c.upper() for c in (args.classes or ()))

    with open_session(args, pull_mode=args.pull) as (conn, inbox):
        conn.send(watch(enable=True, json=True))

        # pull mode: one read is outstanding at a time, the next is granted
        # once everything it delivered has been consumed
        outstanding = False
        t0 = time.monotonic()
        try:
            while args.secs is None or time.monotonic() - t0 < args.secs:
                waiting = args.pull and not outstanding
                n = inbox.try_get(timeout=0.01 if waiting else 0.2)
                if n is None:
                    if waiting:
                        conn.resume_reading()
                        outstanding = True
                    continue
                if isinstance(n, ConnectionClosed):
                    print(f"CLOSED reason={n.reason}")
                    return 0
                if isinstance(n, WriteFailed):
                    raise SessionError(f"Failed to send {n.command!r}", details={"error": n.error})
                if not isinstance(n, Received):
                    continue

                outstanding = False
                event = n.event
                name = event.declared_class if isinstance(event, Unknown) else event.classifier
                if classes and name not in classes:
                    continue
                print(format_event(event), flush=True)
        except KeyboardInterrupt:
            pass

        conn.send(watch(enable=False))
    return 0
