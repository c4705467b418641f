from __future__ import annotations

from ..lib.pkg import apt_clean
from ..pipeline import BaseStep, StepRun


class CleanAptCacheStep(BaseStep):
    step_id = "130_clean_apt_cache"
    prompt = None

    def run(self, run: StepRun) -> None:
        with run.task("Cleaning up apt caches..."):
            apt_clean(dry_run=run.dry_run)
