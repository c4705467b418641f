from __future__ import annotations

import logging

from ..lib.services import reboot
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)


class RebootStep(BaseStep):
    step_id = "140_reboot"
    prompt = "Do you want to reboot now?"
    default = False

    def run(self, run: StepRun) -> None:
        logger.info("Rebooting system...")
        reboot(dry_run=run.dry_run)
