from __future__ import annotations

from .command import run_cmd, sudo


def systemctl_enable(unit: str, *, dry_run: bool = False) -> None:
    run_cmd(sudo(["systemctl", "enable", unit]), dry_run=dry_run)


def systemctl_set_default(target: str, *, dry_run: bool = False) -> None:
    run_cmd(sudo(["systemctl", "set-default", target]), dry_run=dry_run)


def systemctl_daemon_reload(*, dry_run: bool = False) -> None:
    run_cmd(sudo(["systemctl", "daemon-reload"]), dry_run=dry_run)


def reboot(*, dry_run: bool = False) -> None:
    run_cmd(["sync"], dry_run=dry_run)
    run_cmd(sudo(["reboot"]), dry_run=dry_run)
