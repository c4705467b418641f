from __future__ import annotations

import logging

from ..lib.pkg import apt_install
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)

WAYLAND_PACKAGES = ["labwc", "wlr-randr", "seatd"]


class InstallWaylandStep(BaseStep):
    step_id = "30_install_wayland"
    prompt = "Do you want to install Wayland and labwc packages?"
    default = True

    def run(self, run: StepRun) -> None:
        with run.task("Installing Wayland packages..."):
            apt_install(WAYLAND_PACKAGES, with_recommends=False, dry_run=run.dry_run)
        logger.info("Wayland stack installed: %s", ", ".join(WAYLAND_PACKAGES))
