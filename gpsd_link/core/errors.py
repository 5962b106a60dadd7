# gpsd_link/core/errors.py
from __future__ import annotations


class GpsdLinkError(Exception):
    """
    Base class for all expected operational errors in gpsd-link.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no connection yet)
# ---------------------------------------------------------------------------

class ConfigError(GpsdLinkError):
    """
    Settings are invalid or cannot be resolved.

    Examples:
      - settings file missing or not a mapping
      - port out of range
      - decoder reference that does not import
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Sentence errors
# ---------------------------------------------------------------------------

class DecodeError(GpsdLinkError):
    """
    A sentence could not be decoded into its declared event type.

    Examples:
      - required member missing
      - member of the wrong JSON type
      - mode outside the known fix modes

    Never escapes the sentence registry; the sentence is delivered as Unknown.
    """
    code = "decode_error"


# ---------------------------------------------------------------------------
# Session errors (CLI front-end)
# ---------------------------------------------------------------------------

class SessionError(GpsdLinkError):
    """
    A command-line session could not complete.

    Examples:
      - gpsd not reachable at the given address
      - no reply to a query before the timeout
    """
    code = "session_error"
