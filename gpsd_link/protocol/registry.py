# gpsd_link/protocol/registry.py
from __future__ import annotations

import importlib
import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from gpsd_link.core.errors import ConfigError
from gpsd_link.model.base import GpsdEvent, Unknown
from gpsd_link.model.events import BUILTIN_EVENTS

Decoder = Callable[[Any], GpsdEvent]
Decoded = Union[GpsdEvent, Unknown]


def resolve_reference(ref: str) -> Any:
    """
    Import the object named by ``package.module:attr`` or ``package.module.attr``.
    """
    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
    else:
        module_name, _, attr_path = ref.rpartition(".")

    if not module_name or not attr_path:
        raise ConfigError(
            f"Invalid decoder reference '{ref}'.",
            hint="Use 'package.module:Name' or 'package.module.Name'.",
            details={"reference": ref},
        )

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(
            f"Cannot import module '{module_name}' for decoder reference '{ref}'.",
            hint=str(e),
            details={"reference": ref},
        ) from None

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ConfigError(
                f"Module '{module_name}' has no attribute '{attr_path}'.",
                hint="Check the sentence mapping in your settings file.",
                details={"reference": ref},
            ) from None
    return obj


def as_decoder(target: Any) -> Decoder:
    """Event classes decode through their from_json; any other callable is used as is."""
    from_json = getattr(target, "from_json", None)
    if isinstance(target, type) and callable(from_json):
        return from_json
    if callable(target):
        return target
    raise TypeError(f"{target!r} is neither an event class nor a callable")


class SentenceRegistry:
    """
    Maps sentence classifiers to decoders.

    Populated during initialization, then frozen and shared read-only by all
    connections.
    """

    def __init__(self, decoders: Optional[Mapping[str, Decoder]] = None, logger: Optional[logging.Logger] = None):
        self._decoders: Dict[str, Decoder] = dict(decoders or {})
        self._frozen = False
        self._log = logger or logging.getLogger(__name__)

    @classmethod
    def default(cls) -> "SentenceRegistry":
        return cls({ev.classifier: ev.from_json for ev in BUILTIN_EVENTS})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str], *, base: Optional["SentenceRegistry"] = None) -> "SentenceRegistry":
        """Build a registry from classifier -> decoder reference strings."""
        reg = cls(base._decoders if base is not None else None)
        for classifier, ref in mapping.items():
            target = resolve_reference(str(ref))
            try:
                reg.register(str(classifier), as_decoder(target))
            except TypeError as e:
                raise ConfigError(
                    f"Decoder reference '{ref}' for '{classifier}' is not usable.",
                    hint=str(e),
                    details={"classifier": classifier, "reference": ref},
                ) from None
        return reg

    # ---------------- Mutation (initialization only) ----------------
    def register(self, classifier: str, decoder: Decoder) -> None:
        if self._frozen:
            raise RuntimeError("SentenceRegistry is frozen; register decoders before creating connections")
        self._decoders[classifier] = decoder

    def freeze(self) -> "SentenceRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ---------------- Lookup ----------------
    def resolve(self, classifier: str) -> Optional[Decoder]:
        return self._decoders.get(classifier)

    def classifiers(self) -> list[str]:
        return sorted(self._decoders)

    def __contains__(self, classifier: object) -> bool:
        return classifier in self._decoders

    # ---------------- Decoding ----------------
    def decode(self, value: Any) -> Decoded:
        """Decode one parsed sentence. Never raises; failures yield Unknown."""
        if not isinstance(value, dict):
            return Unknown(value)

        classifier = value.get("class")
        if not isinstance(classifier, str):
            return Unknown(value)

        decoder = self.resolve(classifier)
        if decoder is None:
            self._log.debug("SENTENCE_UNRESOLVED class=%s", classifier)
            return Unknown(value)

        try:
            return decoder(value)
        except Exception as e:
            self._log.debug("SENTENCE_DECODE_FAILED class=%s err=%s", classifier, e)
            return Unknown(value)

    def parse_line(self, line: bytes) -> Decoded:
        """Parse one wire line (without terminator) and decode it."""
        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError:
            self._log.debug("SENTENCE_NOT_UTF8 len=%d", len(line))
            return Unknown(line.decode("utf-8", errors="replace"))

        try:
            value = json.loads(text)
        except (ValueError, RecursionError):
            # RecursionError: nesting deeper than the interpreter allows
            self._log.debug("SENTENCE_NOT_JSON text=%r", text[:80])
            return Unknown(text)

        return self.decode(value)
