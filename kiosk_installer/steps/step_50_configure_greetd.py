from __future__ import annotations

import logging

from ..lib.directives import FileDirective
from ..lib.pkg import apt_install
from ..lib.services import systemctl_enable, systemctl_set_default
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)


def render_greetd_config(user: str) -> str:
    return (
        "[terminal]\n"
        "vt = 7\n"
        "[default_session]\n"
        'command = "/usr/bin/labwc"\n'
        f'user = "{user}"\n'
    )


class ConfigureGreetdStep(BaseStep):
    step_id = "50_configure_greetd"
    prompt = "Do you want to install and configure greetd for auto start of labwc?"
    default = True

    def run(self, run: StepRun) -> None:
        with run.task("Installing greetd..."):
            apt_install(["greetd"], dry_run=run.dry_run)

        run.apply(
            FileDirective(
                path=run.ctx.config.greetd_config_path,
                contents=render_greetd_config(run.ctx.env.user),
                privileged=True,
            )
        )

        logger.info("greetd will start labwc for %s", run.ctx.env.user)
        with run.task("Enabling greetd service..."):
            systemctl_enable("greetd", dry_run=run.dry_run)
        with run.task("Setting graphical target..."):
            systemctl_set_default("graphical.target", dry_run=run.dry_run)
