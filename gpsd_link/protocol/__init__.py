# gpsd_link/protocol/__init__.py

from .encoder import encode_command
from .framing import LineFramer
from .registry import SentenceRegistry, resolve_reference

__all__ = [
    "encode_command",
    "LineFramer",
    "SentenceRegistry", "resolve_reference",
]
