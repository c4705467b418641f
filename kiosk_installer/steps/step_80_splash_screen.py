from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from ..lib.command import run_cmd, sudo
from ..lib.directives import LineTokenDirective, RegexLineDirective
from ..lib.pkg import apt_install
from ..pipeline import BaseStep, StepRun

logger = logging.getLogger(__name__)

SPLASH_PACKAGES = ["plymouth", "plymouth-themes", "pix-plym-splash"]
SPLASH_TOKENS = ("quiet", "splash", "plymouth.ignore-serial-consoles")


class SplashScreenStep(BaseStep):
    step_id = "80_splash_screen"
    prompt = "Do you want to install the splash screen?"
    default = True

    def _install_logo(self, run: StepRun, theme_dir: Path) -> None:
        url = run.ctx.config.splash_url
        with tempfile.TemporaryDirectory() as tmp:
            download = Path(tmp) / "splash.png"
            r = run_cmd(["wget", "-q", url, "-O", str(download)], check=False, dry_run=run.dry_run)
            if not r.ok:
                run.warn("Failed to download custom splash logo. Using default.")
                return
            run_cmd(
                sudo(["install", "-m", "644", str(download), str(theme_dir / "splash.png")]),
                dry_run=run.dry_run,
            )
        logger.info("Custom splash logo installed from %s", url)

    def run(self, run: StepRun) -> None:
        cfg = run.ctx.config

        with run.task("Installing splash screen and themes. THIS MAY TAKE SOME TIME..."):
            apt_install(SPLASH_PACKAGES, dry_run=run.dry_run)

        theme_dir = cfg.plymouth_theme_dir
        if not (theme_dir / "pix.script").exists() and not run.dry_run:
            run.warn("pix theme not found after installation. Splash screen may not work correctly.")
        else:
            run_cmd(sudo(["plymouth-set-default-theme", "pix"]), dry_run=run.dry_run)
            self._install_logo(run, theme_dir)
            with run.task("Updating initramfs..."):
                run_cmd(sudo(["update-initramfs", "-u"]), dry_run=run.dry_run)

        # Boot files belong to the firmware partition; never create them.
        run.apply(
            RegexLineDirective(
                path=cfg.config_txt_path,
                line="disable_splash=1",
                pattern=r"^\s*disable_splash\s*=",
                reclaim=r"^\s*#\s*disable_splash\s*=",
                privileged=True,
                create_missing=False,
            )
        )
        run.apply(
            LineTokenDirective(
                path=cfg.cmdline_path,
                tokens=SPLASH_TOKENS,
                privileged=True,
                create_missing=False,
            )
        )
        run.apply(
            LineTokenDirective(
                path=cfg.cmdline_path,
                tokens=("console=tty3",),
                supersedes=(r"console=tty1",),
                privileged=True,
                create_missing=False,
            )
        )
