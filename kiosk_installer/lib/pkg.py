from __future__ import annotations

from typing import Sequence

from .command import run_cmd, sudo

_APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(sudo(["apt-get", "update"], **_APT_ENV), dry_run=dry_run)


def apt_upgrade(*, dry_run: bool = False) -> None:
    run_cmd(sudo(["apt-get", "upgrade", "-y"], **_APT_ENV), dry_run=dry_run)


def apt_install(
    packages: Sequence[str],
    *,
    with_recommends: bool = True,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    argv = [
        "apt-get",
        "install",
        "-y",
    ]
    if not with_recommends:
        argv.append("--no-install-recommends")
    run_cmd(sudo([*argv, *packages], **_APT_ENV), dry_run=dry_run)


def apt_clean(*, dry_run: bool = False) -> None:
    run_cmd(sudo(["apt-get", "clean"]), dry_run=dry_run)


def apt_has_package(package: str, *, dry_run: bool = False) -> bool:
    """Return True if apt knows about a package name.

    Read-only repository metadata query; used to pick between package names
    that differ across Raspberry Pi OS / Debian releases.
    """
    if dry_run:
        # Be permissive in dry-run so planning doesn't fail.
        return True
    r = run_cmd(["apt-cache", "show", package], check=False)
    return r.returncode == 0
