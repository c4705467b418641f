from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Sequence

from ..errors import ProbeUnresolved

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capability:
    """Result of a probe: the chosen value and where it came from.

    source is "probe" (a candidate passed its test), "fallback" (documented
    default, see warning) or "unresolved" (nothing usable).
    """

    value: Any
    source: str = "probe"
    warning: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.source != "unresolved"

    @property
    def degraded(self) -> bool:
        return self.source == "fallback"

    def require(self) -> Any:
        if not self.resolved:
            raise ProbeUnresolved(self.warning or "capability unresolved")
        return self.value


UNRESOLVED = Capability(value=None, source="unresolved")


def first_viable(candidates: Iterable[str], test: Callable[[str], bool]) -> Capability:
    """Return the first candidate passing test, else UNRESOLVED.

    A test that raises OSError/RuntimeError counts as a failed candidate.
    """

    tried: list[str] = []
    for c in candidates:
        tried.append(c)
        try:
            ok = bool(test(c))
        except (OSError, RuntimeError) as e:
            logger.debug("Probe %s raised %s", c, e)
            ok = False
        if ok:
            logger.info("Probe resolved %s (tried: %s)", c, ", ".join(tried))
            return Capability(value=c)
    logger.info("Probe unresolved (tried: %s)", ", ".join(tried) or "nothing")
    return UNRESOLVED


def resolve_package(candidates: Sequence[str], *, has_package: Callable[[str], bool]) -> Capability:
    """First package name known to the repository index; order is preference."""

    cap = first_viable(candidates, has_package)
    if cap.resolved:
        return cap
    return Capability(
        value=None,
        source="unresolved",
        warning=f"No package found in APT (tried: {', '.join(candidates)})",
    )


def is_executable(path: str) -> bool:
    p = Path(path)
    return p.is_file() and os.access(p, os.X_OK)


def resolve_binary(
    names: Sequence[str],
    *,
    fallback_paths: Sequence[str],
    default: str,
    which: Callable[[str], Optional[str]],
    executable: Callable[[str], bool] = is_executable,
) -> Capability:
    """PATH lookup over all names, then fixed paths, then default with a warning."""

    for name in names:
        found = which(name)
        if found:
            logger.info("Binary %s found on PATH: %s", name, found)
            return Capability(value=found)

    cap = first_viable(fallback_paths, executable)
    if cap.resolved:
        return cap

    warning = f"couldn't find {' or '.join(names)} on PATH; using {default}, adjust if needed"
    logger.warning(warning)
    return Capability(value=default, source="fallback", warning=warning)
