from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..errors import ExternalCommandFailed
from .command import run_cmd
from .probe import Capability, first_viable

logger = logging.getLogger(__name__)

EDID_PATHS = (
    "/sys/class/drm/card1-HDMI-A-1/edid",
    "/sys/class/drm/card0-HDMI-A-1/edid",
)

FALLBACK_MODES = (
    "1920x1080@60",
    "1280x720@60",
    "1024x768@60",
    "1600x900@60",
    "1366x768@60",
)

# edid-decode lines such as "1920x1080   60.000000 Hz" or "DMT 0x04: 640x480 60 Hz".
_MODE_RE = re.compile(r"(\d+)x(\d+)\s+(\d+\.\d+|\d+) Hz")


def _read_text(path: Path) -> Optional[str]:
    try:
        txt = path.read_text(encoding="utf-8", errors="ignore").strip()
        return txt or None
    except OSError:
        return None


def detect_board_model() -> Optional[str]:
    """Device-tree model string (e.g. 'Raspberry Pi 5 Model B Rev 1.0'), best-effort."""

    model = _read_text(Path("/sys/firmware/devicetree/base/model")) or _read_text(Path("/proc/device-tree/model"))
    return model.rstrip("\x00") if model else None


def is_readable_edid(path: str) -> bool:
    p = Path(path)
    # Disconnected connectors expose an empty edid file.
    return p.is_file() and os.access(p, os.R_OK) and p.stat().st_size > 0


def find_edid_path(
    candidates: Sequence[str] = EDID_PATHS,
    *,
    readable: Callable[[str], bool] = is_readable_edid,
) -> Capability:
    return first_viable(candidates, readable)


def parse_edid_modes(text: str) -> List[str]:
    """Extract WxH@Hz strings in output order, first occurrence wins."""

    modes: List[str] = []
    for line in text.splitlines():
        m = _MODE_RE.search(line)
        if not m:
            continue
        mode = f"{m.group(1)}x{m.group(2)}@{m.group(3)}"
        if mode not in modes:
            modes.append(mode)
    return modes


def decode_edid(data: bytes, *, dry_run: bool = False) -> str:
    r = run_cmd(["edid-decode"], input_bytes=data, check=False, dry_run=dry_run)
    return r.stdout or ""


def detect_display_modes(
    *,
    edid_paths: Sequence[str] = EDID_PATHS,
    fallback: Sequence[str] = FALLBACK_MODES,
    readable: Callable[[str], bool] = is_readable_edid,
    read: Callable[[str], bytes] = lambda p: Path(p).read_bytes(),
    decode: Callable[[bytes], str] = decode_edid,
) -> Capability:
    """Display modes advertised by the connected monitor.

    Never fails: no readable EDID, a decoder error or zero parsed modes all
    degrade to the fallback list with a warning.
    """

    edid = find_edid_path(edid_paths, readable=readable)
    modes: List[str] = []
    if edid.resolved:
        try:
            modes = parse_edid_modes(decode(read(edid.value)))
        except (OSError, ExternalCommandFailed) as e:
            logger.warning("Reading EDID from %s failed: %s", edid.value, e)
        if modes:
            logger.info("EDID %s advertises %d mode(s)", edid.value, len(modes))
            return Capability(value=modes)

    warning = "No resolutions found via EDID. Using default list."
    logger.warning(warning)
    return Capability(value=list(fallback), source="fallback", warning=warning)
