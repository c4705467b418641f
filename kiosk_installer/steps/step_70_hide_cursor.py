from __future__ import annotations

import logging

from ..lib.command import which
from ..lib.directives import AppendDirective, MarkupAnchorDirective
from ..lib.pkg import apt_install
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)

HIDE_CURSOR_KEYBIND = (
    '<keybind key="W-h">\n'
    '  <action name="HideCursor"/>\n'
    '  <action name="WarpCursor" to="output" x="1" y="1"/>\n'
    "</keybind>\n"
)

RC_XML_DOCUMENT = (
    '<?xml version="1.0"?>\n'
    "<labwc_config>\n"
    "  <keyboard>\n"
    '    <keybind key="W-h">\n'
    '      <action name="HideCursor"/>\n'
    '      <action name="WarpCursor" to="output" x="1" y="1"/>\n'
    "    </keybind>\n"
    "  </keyboard>\n"
    "</labwc_config>\n"
)

HIDE_CURSOR_AUTOSTART = (
    "# Hide cursor on startup (simulate Win+H hotkey)\n"
    "sleep 1 && wtype -M logo -k h -m logo &\n"
)


class HideCursorStep(BaseStep):
    step_id = "70_hide_cursor"
    prompt = "Do you want to hide the mouse cursor in kiosk mode?"
    default = True

    def run(self, run: StepRun) -> None:
        env = run.ctx.env

        if not which("wtype"):
            with run.task("Installing wtype for cursor control..."):
                apt_install(["wtype"], dry_run=run.dry_run)

        logger.info("Hiding cursor via %s and %s", env.rc_xml_path, env.autostart_path)
        run.apply(
            MarkupAnchorDirective(
                path=env.rc_xml_path,
                snippet=HIDE_CURSOR_KEYBIND,
                anchor="</keyboard>",
                document=RC_XML_DOCUMENT,
                markers=("HideCursor",),
            )
        )
        run.apply(
            AppendDirective(
                path=env.autostart_path,
                payload=HIDE_CURSOR_AUTOSTART,
                markers=(r"wtype.*logo.*-k h",),
            )
        )
