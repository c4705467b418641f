from __future__ import annotations

import getpass
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class EnvFacts:
    """Read-only facts about the invoking user, gathered once per run."""

    user: str
    uid: int
    home: Path

    @property
    def is_root(self) -> bool:
        return self.uid == 0

    @property
    def labwc_dir(self) -> Path:
        return self.home / ".config/labwc"

    @property
    def autostart_path(self) -> Path:
        return self.labwc_dir / "autostart"

    @property
    def rc_xml_path(self) -> Path:
        return self.labwc_dir / "rc.xml"


def gather_env_facts() -> EnvFacts:
    user = getpass.getuser()
    return EnvFacts(
        user=user,
        uid=os.geteuid(),
        home=Path(os.path.expanduser(f"~{user}")),
    )
