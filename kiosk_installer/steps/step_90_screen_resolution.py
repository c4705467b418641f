from __future__ import annotations

import logging
import re
from typing import Mapping, Sequence

from ..lib.command import which
from ..lib.directives import LineTokenDirective, RegexLineDirective
from ..lib.hwdetect import decode_edid, detect_display_modes
from ..lib.pkg import apt_install
from ..pipeline import BaseStep, Param, StepRun

logger = logging.getLogger(__name__)


def wlr_randr_mode_directive(path, output: str, mode: str) -> RegexLineDirective:
    return RegexLineDirective(
        path=path,
        line=f"wlr-randr --output {output} --mode {mode}",
        pattern=rf"^\s*wlr-randr\s+--output\s+{re.escape(output)}\s+--mode\s+\S+\s*$",
    )


class ScreenResolutionStep(BaseStep):
    step_id = "90_screen_resolution"
    prompt = "Do you want to set the screen resolution in cmdline.txt and the labwc autostart file?"
    default = True
    params = (Param("resolution", "Please choose a resolution", kind="choice"),)

    def probe(self, run: StepRun) -> Mapping[str, Sequence[str]]:
        cfg = run.ctx.config

        if not which("edid-decode"):
            with run.task("Installing required tool edid-decode..."):
                apt_install(["edid-decode"], dry_run=run.dry_run)

        modes = detect_display_modes(
            edid_paths=cfg.edid_paths,
            fallback=cfg.fallback_modes,
            decode=lambda data: decode_edid(data, dry_run=run.dry_run),
        )
        if modes.degraded:
            run.warn(modes.warning)
        return {"resolution": modes.value}

    def run(self, run: StepRun) -> None:
        cfg = run.ctx.config
        output = cfg.output
        mode = str(run.params.get("resolution") or (run.options.get("resolution") or cfg.fallback_modes)[0])
        logger.info("Selected resolution %s on %s", mode, output)

        run.apply(
            LineTokenDirective(
                path=cfg.cmdline_path,
                tokens=(f"video={output}:{mode}",),
                supersedes=(rf"video={re.escape(output)}:\S+",),
                prepend=True,
                privileged=True,
                create_missing=False,
            )
        )
        run.apply(wlr_randr_mode_directive(run.ctx.env.autostart_path, output, mode))
