from __future__ import annotations

from ..lib.pkg import apt_upgrade
from ..pipeline import BaseStep, StepRun


class UpgradePackagesStep(BaseStep):
    step_id = "20_upgrade_packages"
    prompt = "Do you want to upgrade installed packages?"
    default = True

    def run(self, run: StepRun) -> None:
        with run.task("Upgrading installed packages. THIS MAY TAKE SOME TIME..."):
            apt_upgrade(dry_run=run.dry_run)
