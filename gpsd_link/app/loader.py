# gpsd_link/app/loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gpsd_link.core.errors import ConfigError
from .config import GpsdSettings


class SettingsLoader:
    """
    Load gpsd-link settings from YAML.

    The packaged gpsd.yml provides the defaults; an optional user file is
    merged over it (scalars replace, the ``json`` sentence mapping is merged
    key by key).
    """

    DEFAULT_FILE = Path(__file__).with_name("gpsd.yml")
    ROOT_KEY = "gpsd"

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self.document: Dict[str, Any] = {}

    def load(self) -> GpsdSettings:
        merged = self._section(self._load_yaml(self.DEFAULT_FILE), self.DEFAULT_FILE)

        if self.path is not None:
            if not self.path.exists():
                raise ConfigError(
                    f"Settings file not found: {self.path}",
                    hint="Pass an existing YAML file or omit it to use the defaults.",
                    details={"path": str(self.path)},
                )
            user = self._section(self._load_yaml(self.path), self.path)
            sentences = dict(merged.get("json") or {})
            sentences.update(user.get("json") or {})
            merged.update(user)
            merged["json"] = sentences

        self.document = {self.ROOT_KEY: merged}
        return self._to_settings(merged)

    # ---------------------------------------------------------------------
    # YAML utility
    # ---------------------------------------------------------------------
    @staticmethod
    def _load_yaml(path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Settings file is not valid YAML: {path}",
                hint=str(e),
                details={"path": str(path)},
            ) from None

    def _section(self, doc: Any, path: Path) -> Dict[str, Any]:
        if not isinstance(doc, dict):
            raise ConfigError(f"{path} must be a mapping", details={"path": str(path)})

        section = doc.get(self.ROOT_KEY) or {}
        if not isinstance(section, dict):
            raise ConfigError(
                f"{path} '{self.ROOT_KEY}' node must be a mapping",
                details={"path": str(path)},
            )

        sentences = section.get("json")
        if sentences is not None and not isinstance(sentences, dict):
            raise ConfigError(
                f"{path} '{self.ROOT_KEY}.json' must map classifiers to decoder references",
                details={"path": str(path)},
            )
        return dict(section)

    @staticmethod
    def _to_settings(section: Dict[str, Any]) -> GpsdSettings:
        hostname = section.get("hostname")
        if not isinstance(hostname, str) or not hostname:
            raise ConfigError(
                "Setting 'hostname' must be a non-empty string.",
                details={"hostname": hostname},
            )

        port = section.get("port")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError(
                "Setting 'port' must be an integer within 1..65535.",
                details={"port": port},
            )

        sentences: Dict[str, str] = {}
        for classifier, ref in (section.get("json") or {}).items():
            if not isinstance(ref, str) or not ref:
                raise ConfigError(
                    f"Decoder reference for '{classifier}' must be a non-empty string.",
                    details={"classifier": classifier, "reference": ref},
                )
            sentences[str(classifier)] = ref

        return GpsdSettings(hostname=hostname, port=port, sentences=sentences)


def load_settings(path: Optional[str | Path] = None) -> GpsdSettings:
    return SettingsLoader(path).load()
