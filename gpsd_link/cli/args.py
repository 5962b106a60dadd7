# gpsd_link/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid port '{value}'") from None
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"Port out of range: {port}")
    return port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gpsd-link", description="Talk to a gpsd daemon over its JSON protocol.")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--host", default=None, help="gpsd host (default: from settings, 'localhost').")
    common.add_argument("--port", type=_port, default=None, help="gpsd port (default: from settings, 2947).")
    common.add_argument("--config", default=None, help="YAML settings file merged over the packaged defaults.")
    common.add_argument("--connect-timeout", type=float, default=5.0)
    common.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING")
    common.add_argument("--log-file", default=None, help="Also write the log to this file.")

    sub = parser.add_subparsers(dest="cmd", required=True)

    for name, text in (
        ("version", "Print the daemon's VERSION report."),
        ("devices", "List the devices gpsd knows about."),
        ("poll", "Print one POLL snapshot (requires an active watch)."),
    ):
        p = sub.add_parser(name, parents=[common], help=text)
        p.add_argument("--timeout", type=float, default=5.0, help="Seconds to wait for the reply.")

    pw = sub.add_parser("watch", parents=[common], help="Enable JSON watching and print every sentence.")
    pw.add_argument("--secs", type=float, default=None, help="Stop after N seconds (default: until Ctrl-C).")
    pw.add_argument("--class", dest="classes", action="append", default=None,
                    help="Only print sentences of this class (repeatable).")
    pw.add_argument("--pull", action="store_true", help="Read from the socket only as sentences are consumed.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
