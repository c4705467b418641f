from __future__ import annotations

import logging
import re

from ..lib.directives import RegexLineDirective
from ..pipeline import BaseStep, Param, StepRun

logger = logging.getLogger(__name__)

ORIENTATIONS = (
    ("normal (0°)", "normal"),
    ("90° clockwise", "90"),
    ("180°", "180"),
    ("270° clockwise", "270"),
)


class ScreenOrientationStep(BaseStep):
    step_id = "100_screen_orientation"
    prompt = "Do you want to set the screen orientation (rotation)?"
    default = False
    params = (
        Param("transform", "Please choose an orientation", default="normal", kind="choice", choices=ORIENTATIONS),
    )

    def run(self, run: StepRun) -> None:
        output = run.ctx.config.output
        transform = str(run.params.get("transform") or "normal")
        if transform not in {value for _, value in ORIENTATIONS}:
            raise ValueError(f"Unsupported orientation {transform!r}")
        logger.info("Rotating %s: %s", output, transform)

        run.apply(
            RegexLineDirective(
                path=run.ctx.env.autostart_path,
                line=f"wlr-randr --output {output} --transform {transform}",
                pattern=rf"^\s*wlr-randr\s+--output\s+{re.escape(output)}\b.*--transform\b",
            )
        )
