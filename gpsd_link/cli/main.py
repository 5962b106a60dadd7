# gpsd_link/cli/main.py
from __future__ import annotations

from typing import Optional

from gpsd_link.core.errors import GpsdLinkError

from gpsd_link.cli.args import parse_args
from gpsd_link.cli.commands import (
    configure_logging,
    cmd_version,
    cmd_devices,
    cmd_poll,
    cmd_watch,
)

COMMANDS = {
    "version": cmd_version,
    "devices": cmd_devices,
    "poll": cmd_poll,
    "watch": cmd_watch,
}


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)
        configure_logging(args.log_level, args.log_file)

        handler = COMMANDS.get(args.cmd)
        if handler is None:
            return 2
        return handler(args)
    except GpsdLinkError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
