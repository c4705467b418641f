from __future__ import annotations

import logging
from pathlib import Path

from ..lib.directives import FileDirective
from ..lib.pkg import apt_install
from ..lib.services import systemctl_daemon_reload, systemctl_enable
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)

CEC_UNIT = "cec-setup.service"
CEC_KEYMAP_NAME = "custom-cec.toml"

CEC_KEYMAP = """\
[[protocols]]
name = "custom_cec"
protocol = "cec"
[protocols.scancodes]
0x00 = "KEY_ENTER"
0x01 = "KEY_UP"
0x02 = "KEY_DOWN"
0x03 = "KEY_LEFT"
0x04 = "KEY_RIGHT"
0x09 = "KEY_EXIT"
0x0d = "KEY_BACK"
0x44 = "KEY_PLAYPAUSE"
0x45 = "KEY_STOPCD"
0x46 = "KEY_PAUSECD"
"""


def render_cec_unit(keymap_path: Path) -> str:
    return (
        "[Unit]\n"
        "Description=CEC Remote Control Setup\n"
        "After=multi-user.target\n"
        "Before=graphical.target\n"
        "\n"
        "[Service]\n"
        "Type=oneshot\n"
        "ExecStart=/usr/bin/cec-ctl -d /dev/cec1 --playback\n"
        "ExecStart=/bin/sleep 2\n"
        "ExecStart=/usr/bin/cec-ctl -d /dev/cec1 --active-source phys-addr=1.0.0.0\n"
        "ExecStart=/bin/sleep 1\n"
        f"ExecStart=/usr/bin/ir-keytable -c -s rc0 -w {keymap_path}\n"
        "RemainAfterExit=yes\n"
        "\n"
        "[Install]\n"
        "WantedBy=multi-user.target\n"
    )


class CecRemoteStep(BaseStep):
    step_id = "120_cec_remote"
    prompt = "Do you want to enable TV remote control via HDMI-CEC?"
    default = False

    def run(self, run: StepRun) -> None:
        cfg = run.ctx.config
        keymap_path = cfg.keymaps_dir / CEC_KEYMAP_NAME

        with run.task("Installing CEC utilities..."):
            apt_install(["ir-keytable"], dry_run=run.dry_run)

        run.apply(FileDirective(path=keymap_path, contents=CEC_KEYMAP, privileged=True))
        run.apply(
            FileDirective(
                path=cfg.systemd_dir / CEC_UNIT,
                contents=render_cec_unit(keymap_path),
                privileged=True,
            )
        )

        with run.task("Enabling CEC service..."):
            systemctl_daemon_reload(dry_run=run.dry_run)
            systemctl_enable(CEC_UNIT, dry_run=run.dry_run)
        logger.info("Make sure HDMI-CEC (SimpLink/Anynet+/Bravia Sync) is enabled on the TV")
