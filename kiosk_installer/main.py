from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

import click

from .config import KioskConfig, load_config
from .errors import DisallowedPrivilege
from .lib.env import EnvFacts, gather_env_facts
from .lib.files import FileWriter
from .lib.hwdetect import detect_board_model
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import Presenter, RunReport, Step, StepContext, run_sequence
from .report import save_report
from .steps import (
    AutostartBrowserStep,
    CecRemoteStep,
    CleanAptCacheStep,
    ConfigureGreetdStep,
    HdmiAudioStep,
    HideCursorStep,
    InstallBrowserStep,
    InstallWaylandStep,
    RebootStep,
    ScreenOrientationStep,
    ScreenResolutionStep,
    SplashScreenStep,
    UpdatePackageListStep,
    UpgradePackagesStep,
)
from .ui import AnswersPresenter, InteractivePresenter

logger = logging.getLogger(__name__)


def build_steps(config: KioskConfig) -> List[Step]:
    return [
        UpdatePackageListStep(),
        UpgradePackagesStep(),
        InstallWaylandStep(),
        InstallBrowserStep(),
        ConfigureGreetdStep(),
        AutostartBrowserStep(default_url=config.default_url),
        HideCursorStep(),
        SplashScreenStep(),
        ScreenResolutionStep(),
        ScreenOrientationStep(),
        HdmiAudioStep(),
        CecRemoteStep(),
        CleanAptCacheStep(),
        RebootStep(),
    ]


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    assume_yes: bool = False,
    dry_run: bool = False,
    only: Optional[Sequence[str]] = None,
    skip: Optional[Sequence[str]] = None,
    report_path: Optional[str] = None,
    env: Optional[EnvFacts] = None,
    presenter: Optional[Presenter] = None,
) -> RunReport:
    """Run the provisioning sequence once and return its report."""

    actual_log_path = configure_logging(log_path=log_path)

    env = env or gather_env_facts()
    if env.is_root:
        raise DisallowedPrivilege(
            "This installer should not be run as root. Please run as a normal user with sudo privileges."
        )
    logger.info("User %s (uid=%d), home %s, log %s", env.user, env.uid, str(env.home), actual_log_path)
    logger.info("Board: %s", detect_board_model() or "unknown")

    config = load_config(config_path)
    steps = build_steps(config)

    known = {s.step_id for s in steps}
    unknown = sorted((set(only or ()) | set(skip or ())) - known)
    if unknown:
        raise ValueError(f"Unknown step id(s): {', '.join(unknown)}")

    if presenter is None:
        presenter = AnswersPresenter(config) if assume_yes else InteractivePresenter(config)

    ctx = StepContext(env=env, config=config, writer=FileWriter(dry_run=dry_run), dry_run=dry_run)
    report = run_sequence(steps=steps, ctx=ctx, presenter=presenter, only=only, skip=skip)

    if report_path:
        save_report(report_path, report)
    return report


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="kiosk-installer")
    p.add_argument("--config", default=None, help="Settings and pre-recorded answers (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--yes", action="store_true", help="Do not prompt; use recorded answers or step defaults")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without running them")
    p.add_argument("--only", action="append", default=None, metavar="STEP_ID", help="Run only this step (repeatable)")
    p.add_argument("--skip", action="append", default=None, metavar="STEP_ID", help="Skip this step (repeatable)")
    p.add_argument("--report", default=None, help="Write the run report to this path (json|yaml)")
    p.add_argument("--list-steps", action="store_true", help="List step ids and exit")

    args = p.parse_args(argv)

    if args.list_steps:
        for step in build_steps(KioskConfig()):
            gate = "ungated" if step.prompt is None else ("default yes" if step.default else "default no")
            click.echo(f"{step.step_id:<24} {gate:<12} {step.prompt or ''}")
        return 0

    try:
        report = run(
            config_path=args.config,
            log_path=args.log,
            assume_yes=args.yes,
            dry_run=args.dry_run,
            only=args.only,
            skip=args.skip,
            report_path=args.report,
        )
    except DisallowedPrivilege as e:
        logger.error("%s", e)
        click.secho(str(e), fg="red", err=True)
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        click.secho(f"Invalid configuration: {e}", fg="red", err=True)
        return 2
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        click.echo("\nAborted.", err=True)
        return 130

    if "140_reboot" not in report.completed:
        click.secho("Please remember to reboot your system manually for all changes to take effect.", fg="yellow")
    click.secho(f"Setup {report.status}.", fg="red" if report.failed else "green", bold=True)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
