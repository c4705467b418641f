from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.hwdetect import EDID_PATHS, FALLBACK_MODES

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://webglsamples.org/aquarium/aquarium.html"
DEFAULT_SPLASH_URL = (
    "https://raw.githubusercontent.com/TOLDOTECHNIK/Raspberry-Pi-Kiosk-Display-System/"
    "main/_assets/splashscreens/splash.png"
)


@dataclass(frozen=True)
class KioskConfig:
    """Installer settings plus pre-recorded answers for unattended runs.

    Layout (JSON or YAML):

      settings:  {output: HDMI-A-1, boot_dir: /boot/firmware, ...}
      answers:   {60_autostart_browser: true, 100_screen_orientation: false}
      params:    {60_autostart_browser: {url: https://example.org}}
    """

    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def _settings(self) -> Dict[str, Any]:
        return self.raw.get("settings") or {}

    @property
    def output(self) -> str:
        return str(self._settings.get("output") or "HDMI-A-1")

    @property
    def boot_dir(self) -> Path:
        return Path(self._settings.get("boot_dir") or "/boot/firmware")

    @property
    def cmdline_path(self) -> Path:
        return self.boot_dir / "cmdline.txt"

    @property
    def config_txt_path(self) -> Path:
        return self.boot_dir / "config.txt"

    @property
    def greetd_config_path(self) -> Path:
        return Path(self._settings.get("greetd_dir") or "/etc/greetd") / "config.toml"

    @property
    def systemd_dir(self) -> Path:
        return Path(self._settings.get("systemd_dir") or "/etc/systemd/system")

    @property
    def keymaps_dir(self) -> Path:
        return Path(self._settings.get("keymaps_dir") or "/etc/rc_keymaps")

    @property
    def plymouth_theme_dir(self) -> Path:
        return Path(self._settings.get("plymouth_theme_dir") or "/usr/share/plymouth/themes/pix")

    @property
    def edid_paths(self) -> List[str]:
        return [str(p) for p in (self._settings.get("edid_paths") or EDID_PATHS)]

    @property
    def fallback_modes(self) -> List[str]:
        return [str(m) for m in (self._settings.get("fallback_modes") or FALLBACK_MODES)]

    @property
    def default_url(self) -> str:
        return str(self._settings.get("default_url") or DEFAULT_URL)

    @property
    def splash_url(self) -> str:
        return str(self._settings.get("splash_url") or DEFAULT_SPLASH_URL)

    @property
    def browser_packages(self) -> List[str]:
        return list(self._settings.get("browser_packages") or ["chromium", "chromium-browser"])

    @property
    def browser_binaries(self) -> List[str]:
        return list(self._settings.get("browser_binaries") or ["chromium", "chromium-browser"])

    def answer(self, step_id: str) -> Optional[bool]:
        value = (self.raw.get("answers") or {}).get(step_id)
        return None if value is None else bool(value)

    def params(self, step_id: str) -> Dict[str, Any]:
        return dict((self.raw.get("params") or {}).get(step_id) or {})


_LIST_SETTINGS = ("edid_paths", "fallback_modes", "browser_packages", "browser_binaries")


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to YAML for unknown extensions (JSON is valid YAML).
    return "yaml"


def load_config(path: Optional[str]) -> KioskConfig:
    if not path:
        return KioskConfig()

    p = Path(path).expanduser()
    if not p.exists():
        raise FileNotFoundError(path)

    try:
        text = p.read_text(encoding="utf-8")
        if _detect_format(p) == "json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Cannot read config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a mapping/object, got {type(raw).__name__}")

    for section in ("settings", "answers", "params"):
        if not isinstance(raw.get(section) or {}, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")

    settings = raw.get("settings") or {}
    for key in _LIST_SETTINGS:
        if settings.get(key) is not None and not isinstance(settings[key], list):
            raise ValueError(f"Config setting '{key}' must be a list")

    logger.info("Loaded config %s (sections: %s)", str(p), ", ".join(sorted(raw)) or "none")
    return KioskConfig(raw=raw)
