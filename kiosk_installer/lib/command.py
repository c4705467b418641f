from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..errors import ExternalCommandFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def sudo(argv: Sequence[str], **env: str) -> list[str]:
    """Prefix argv with sudo; env pairs are passed as VAR=value (sudo resets the environment)."""

    return ["sudo", *[f"{k}={v}" for k, v in env.items()], *argv]


def which(name: str) -> str | None:
    return shutil.which(name)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    input_bytes: bytes | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr (stdout decoded leniently when input_bytes is used).
    - dry_run logs but does not execute.
    - check raises ExternalCommandFailed on a non-zero exit; a missing
      executable raises it regardless of check.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    binary = input_bytes is not None
    try:
        p = subprocess.run(
            argv_list,
            input=input_bytes if binary else input_text,
            text=not binary,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except OSError as e:
        raise ExternalCommandFailed(
            f"Command could not be started: {_fmt_argv(argv_list)}: {e}", argv=argv_list
        ) from e

    stdout = p.stdout.decode("utf-8", errors="replace") if binary else p.stdout
    stderr = p.stderr.decode("utf-8", errors="replace") if binary else p.stderr

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise ExternalCommandFailed(
            f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}\n{stderr}",
            argv=argv_list,
            returncode=p.returncode,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
