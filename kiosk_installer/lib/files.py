from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import ExternalCommandFailed, WriteDenied
from .command import run_cmd, sudo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileWriter:
    """Reads and writes target files.

    Privileged access goes through sudo (mkdir -p / tee / cat); the caller
    decides per target whether it needs it. dry_run logs writes only.
    """

    dry_run: bool = False

    def read_text(self, path: Path, *, privileged: bool = False) -> Optional[str]:
        """Return file contents, or None when the file does not exist."""

        p = Path(path)
        if not p.exists():
            return None
        try:
            return p.read_text(encoding="utf-8")
        except PermissionError:
            if not privileged:
                raise
        r = run_cmd(sudo(["cat", str(p)]))
        return r.stdout

    def write_text(self, path: Path, contents: str, *, privileged: bool = False) -> None:
        p = Path(path)
        if self.dry_run:
            logger.info("Would write %s (%d bytes)", str(p), len(contents))
            return

        if privileged:
            try:
                run_cmd(sudo(["mkdir", "-p", str(p.parent)]))
                run_cmd(sudo(["tee", str(p)]), input_text=contents)
            except ExternalCommandFailed as e:
                raise WriteDenied(f"Privileged write to {p} failed: {e}") from e
            return

        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(contents, encoding="utf-8")
        except PermissionError as e:
            raise WriteDenied(f"Cannot write {p}: {e}") from e
