from __future__ import annotations

import logging

from ..lib.directives import RegexLineDirective
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)


class HdmiAudioStep(BaseStep):
    step_id = "110_hdmi_audio"
    prompt = "Do you want to force audio output to HDMI?"
    default = True

    def run(self, run: StepRun) -> None:
        logger.info("Forcing audio output to HDMI in %s", run.ctx.config.config_txt_path)
        run.apply(
            RegexLineDirective(
                path=run.ctx.config.config_txt_path,
                line="dtparam=audio=off",
                pattern=r"^dtparam=audio=",
                reclaim=r"^#\s*dtparam=audio=",
                privileged=True,
                create_missing=False,
            )
        )
