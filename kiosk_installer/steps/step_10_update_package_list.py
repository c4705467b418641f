from __future__ import annotations

from ..lib.pkg import apt_update
from ..pipeline import BaseStep, StepRun


class UpdatePackageListStep(BaseStep):
    step_id = "10_update_package_list"
    prompt = "Do you want to update the package list?"
    default = True

    def run(self, run: StepRun) -> None:
        with run.task("Updating package list..."):
            apt_update(dry_run=run.dry_run)
