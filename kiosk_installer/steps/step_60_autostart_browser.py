from __future__ import annotations

import logging
import re
import shlex
from typing import Tuple

from ..config import DEFAULT_URL
from ..lib.command import which
from ..lib.directives import AppendDirective
from ..lib.probe import resolve_binary
from ..pipeline import BaseStep, Param, StepRun

logger = logging.getLogger(__name__)

BROWSER_FALLBACK_PATHS = ["/usr/bin/chromium", "/usr/bin/chromium-browser"]
BROWSER_DEFAULT_PATH = "/usr/bin/chromium"


def render_browser_command(binary: str, url: str, *, incognito: bool) -> str:
    flags = "--incognito " if incognito else ""
    return f"{binary} {flags}--autoplay-policy=no-user-gesture-required --kiosk {shlex.quote(url)}"


def render_network_wait_block(command: str, *, ping_host: str, max_wait: int) -> str:
    return (
        "# Launch Chromium in kiosk mode (with network wait)\n"
        "(\n"
        f"  # Wait for network connectivity (max {max_wait}s)\n"
        f"  for i in $(seq 1 {max_wait}); do\n"
        f"    if ping -c 1 -W 2 {shlex.quote(ping_host)} > /dev/null 2>&1; then\n"
        "      break\n"
        "    fi\n"
        "    sleep 1\n"
        "  done\n"
        f"  {command}\n"
        ") &\n"
    )


class AutostartBrowserStep(BaseStep):
    step_id = "60_autostart_browser"
    prompt = "Do you want to create an autostart (chromium) script for labwc?"
    default = True

    def __init__(self, default_url: str = DEFAULT_URL) -> None:
        self.default_url = default_url

    @property
    def params(self) -> Tuple[Param, ...]:  # type: ignore[override]
        return (
            Param("url", "Enter the URL to open in Chromium", default=self.default_url),
            Param("incognito", "Start browser in incognito mode?", default=False, kind="confirm"),
            Param(
                "network_wait",
                "Wait for network connectivity before launching Chromium?",
                default=False,
                kind="confirm",
            ),
            Param("ping_host", "Enter host to ping for network check", default="8.8.8.8", when="network_wait"),
            Param("max_wait", "Enter maximum wait time in seconds", default=30, kind="int", when="network_wait"),
        )

    def run(self, run: StepRun) -> None:
        cfg = run.ctx.config
        p = run.params

        binary = resolve_binary(
            cfg.browser_binaries,
            fallback_paths=BROWSER_FALLBACK_PATHS,
            default=BROWSER_DEFAULT_PATH,
            which=which,
        )
        if binary.degraded:
            run.warn(binary.warning)

        command = render_browser_command(
            binary.require(),
            str(p.get("url") or self.default_url),
            incognito=bool(p.get("incognito")),
        )
        if p.get("network_wait"):
            payload = render_network_wait_block(
                command,
                ping_host=str(p.get("ping_host") or "8.8.8.8"),
                max_wait=int(p.get("max_wait") or 30),
            )
        else:
            payload = f"{command} &"

        logger.info("Autostart command: %s", command)
        # Any browser spelling already in the file counts as configured.
        markers = tuple(re.escape(name) for name in cfg.browser_binaries)
        run.apply(AppendDirective(path=run.ctx.env.autostart_path, payload=payload, markers=markers))
