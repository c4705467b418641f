"""Pytest fixtures for kiosk_installer tests."""

import re
import tempfile
from contextlib import nullcontext
from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest

from kiosk_installer.config import KioskConfig
from kiosk_installer.errors import ExternalCommandFailed
from kiosk_installer.lib.command import CmdResult
from kiosk_installer.lib.env import EnvFacts
from kiosk_installer.lib.files import FileWriter
from kiosk_installer.pipeline import StepContext, StepRun

RUN_CMD_MODULES = [
    "kiosk_installer.lib.files",
    "kiosk_installer.lib.pkg",
    "kiosk_installer.lib.services",
    "kiosk_installer.lib.hwdetect",
    "kiosk_installer.steps.step_80_splash_screen",
]

WHICH_MODULES = [
    "kiosk_installer.steps.step_60_autostart_browser",
    "kiosk_installer.steps.step_70_hide_cursor",
    "kiosk_installer.steps.step_90_screen_resolution",
]


class FakeRunner:
    """Stands in for run_cmd.

    Records every argv. ``sudo mkdir -p``, ``sudo tee`` and ``sudo cat``
    act on the real (temporary) filesystem so privileged writes can be
    checked; everything else succeeds unless listed in ``failures``.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[bytes]] = []
        self.failures: Dict[str, int] = {}
        self.exact_failures: Dict[str, int] = {}
        self.stdout: Dict[str, str] = {}

    def fail(self, command: str, returncode: int = 100, *, exact: bool = False) -> None:
        """Make commands starting with (or equal to, when exact) command fail."""
        (self.exact_failures if exact else self.failures)[command] = returncode

    @property
    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]

    def ran(self, command: str) -> bool:
        return any(command in c for c in self.commands)

    def __call__(self, argv, *, check=True, env=None, cwd=None, input_text=None, input_bytes=None, dry_run=False):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input_bytes)
        if dry_run:
            return CmdResult(argv=argv, returncode=0, stdout="", stderr="")

        cmd = argv[1:] if argv and argv[0] == "sudo" else list(argv)
        while cmd and re.match(r"^[A-Z_]+=", cmd[0]):
            cmd.pop(0)
        line = " ".join(cmd)

        returncode = 0
        for prefix, rc in self.failures.items():
            if line.startswith(prefix):
                returncode = rc
        returncode = self.exact_failures.get(line, returncode)

        stdout = self.stdout.get(cmd[0], "") if cmd else ""
        if returncode == 0:
            if cmd[:2] == ["mkdir", "-p"]:
                Path(cmd[2]).mkdir(parents=True, exist_ok=True)
            elif cmd[:1] == ["tee"]:
                Path(cmd[1]).write_text(input_text or "", encoding="utf-8")
            elif cmd[:1] == ["cat"]:
                stdout = Path(cmd[1]).read_text(encoding="utf-8")

        if check and returncode != 0:
            raise ExternalCommandFailed(f"Command failed ({returncode}): {line}", argv=argv, returncode=returncode)
        return CmdResult(argv=argv, returncode=returncode, stdout=stdout, stderr="")


class ScriptedPresenter:
    """Presenter with canned answers; records what it was asked."""

    def __init__(self, answers: Optional[dict] = None, params: Optional[dict] = None) -> None:
        self.answers = answers or {}
        self.params = params or {}
        self.asked: List[str] = []
        self.options: Dict[str, dict] = {}
        self.notified: list = []

    def confirm(self, step) -> bool:
        self.asked.append(step.step_id)
        return self.answers.get(step.step_id, step.default)

    def ask_params(self, step, options) -> dict:
        self.options[step.step_id] = dict(options)
        values = {}
        for p in step.params:
            if options.get(p.name):
                values[p.name] = options[p.name][0]
            else:
                values[p.name] = p.default
        values.update(self.params.get(step.step_id) or {})
        return values

    def task(self, message):
        return nullcontext()

    def notify(self, outcome) -> None:
        self.notified.append(outcome)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def env_facts(temp_dir: Path) -> EnvFacts:
    home = temp_dir / "home" / "pi"
    home.mkdir(parents=True)
    return EnvFacts(user="pi", uid=1000, home=home)


@pytest.fixture
def boot_dir(temp_dir: Path) -> Path:
    d = temp_dir / "boot" / "firmware"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def settings(temp_dir: Path, boot_dir: Path) -> dict:
    return {
        "boot_dir": str(boot_dir),
        "greetd_dir": str(temp_dir / "etc" / "greetd"),
        "systemd_dir": str(temp_dir / "etc" / "systemd" / "system"),
        "keymaps_dir": str(temp_dir / "etc" / "rc_keymaps"),
        "plymouth_theme_dir": str(temp_dir / "plymouth" / "pix"),
        "edid_paths": [str(temp_dir / "drm" / "card1-HDMI-A-1" / "edid")],
    }


@pytest.fixture
def config(settings: dict) -> KioskConfig:
    return KioskConfig(raw={"settings": settings})


@pytest.fixture
def fake_runner(monkeypatch) -> FakeRunner:
    import importlib

    runner = FakeRunner()
    for name in RUN_CMD_MODULES:
        monkeypatch.setattr(importlib.import_module(name), "run_cmd", runner)
    return runner


@pytest.fixture
def which_map(monkeypatch) -> dict:
    """Binaries visible on PATH; tests add entries as name -> path."""
    import importlib

    found: dict = {}
    for name in WHICH_MODULES:
        monkeypatch.setattr(importlib.import_module(name), "which", lambda n: found.get(n))
    return found


@pytest.fixture
def ctx(env_facts: EnvFacts, config: KioskConfig, fake_runner: FakeRunner) -> StepContext:
    return StepContext(env=env_facts, config=config, writer=FileWriter())


@pytest.fixture
def writer() -> FileWriter:
    return FileWriter()


@pytest.fixture
def presenter() -> ScriptedPresenter:
    return ScriptedPresenter()


def make_run(ctx: StepContext, step_id: str = "test", **params) -> StepRun:
    run = StepRun(ctx, step_id, task=lambda message: nullcontext())
    run.params = dict(params)
    return run
