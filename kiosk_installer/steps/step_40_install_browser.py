from __future__ import annotations

import logging

from ..lib.pkg import apt_has_package, apt_install
from ..lib.probe import resolve_package
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)


class InstallBrowserStep(BaseStep):
    step_id = "40_install_browser"
    prompt = "Do you want to install Chromium Browser?"
    default = True

    def run(self, run: StepRun) -> None:
        candidates = run.ctx.config.browser_packages
        pkg = resolve_package(candidates, has_package=lambda p: apt_has_package(p, dry_run=run.dry_run))
        if not pkg.resolved:
            run.warn(
                f"{pkg.warning}. You may need to enable the appropriate repository or install manually."
            )
            return

        with run.task(f"Installing {pkg.value}. THIS MAY TAKE SOME TIME..."):
            apt_install([pkg.value], with_recommends=False, dry_run=run.dry_run)
        logger.info("Browser installed: %s", pkg.value)
