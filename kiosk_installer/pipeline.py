from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Callable,
    ContextManager,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from .config import KioskConfig
from .lib.directives import ApplyResult, Directive, apply_directive
from .lib.env import EnvFacts
from .lib.files import FileWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Param:
    """A sub-question asked after a step is accepted.

    kind: text | confirm | int | choice. ``when`` names a confirm param that
    must be true for this one to be asked (otherwise its default is used).
    """

    name: str
    prompt: str
    default: Any = None
    kind: str = "text"
    choices: Tuple[Tuple[str, str], ...] = ()
    when: Optional[str] = None


@dataclass(frozen=True)
class StepContext:
    env: EnvFacts
    config: KioskConfig
    writer: FileWriter
    dry_run: bool = False


@contextmanager
def log_task(message: str) -> Iterator[None]:
    logger.info("%s", message)
    yield
    logger.info("%s done", message)


class StepRun:
    """Per-step scratchpad: resolved params, directive results, warnings."""

    def __init__(
        self,
        ctx: StepContext,
        step_id: str,
        *,
        task: Callable[[str], ContextManager[None]] = log_task,
    ) -> None:
        self.ctx = ctx
        self.step_id = step_id
        self.params: Dict[str, Any] = {}
        self.options: Dict[str, List[str]] = {}
        self.warnings: List[str] = []
        self.results: List[ApplyResult] = []
        self._task = task

    @property
    def dry_run(self) -> bool:
        return self.ctx.dry_run

    def task(self, message: str) -> ContextManager[None]:
        return self._task(message)

    def warn(self, message: str) -> None:
        logger.warning("[%s] %s", self.step_id, message)
        self.warnings.append(message)

    def apply(self, directive: Directive) -> ApplyResult:
        result = apply_directive(directive, writer=self.ctx.writer)
        self.results.append(result)
        if result.is_warning:
            self.warnings.append(result.detail)
        return result


class Step(Protocol):
    """A single user-gated provisioning step."""

    step_id: str
    prompt: Optional[str]
    default: bool
    params: Tuple[Param, ...]

    def probe(self, run: StepRun) -> Mapping[str, Sequence[str]]:
        ...

    def run(self, run: StepRun) -> None:
        ...


class BaseStep:
    step_id = ""
    prompt: Optional[str] = None
    default = True
    params: Tuple[Param, ...] = ()

    def probe(self, run: StepRun) -> Mapping[str, Sequence[str]]:
        return {}

    def run(self, run: StepRun) -> None:
        raise NotImplementedError


class StepStatus(str, Enum):
    PENDING = "pending"
    DECLINED = "declined"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StepOutcome:
    step_id: str
    status: StepStatus = StepStatus.PENDING
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    results: List[ApplyResult] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step_id,
            "status": self.status.value,
            "error": self.error,
            "warnings": list(self.warnings),
            "results": [r.as_dict() for r in self.results],
        }


@dataclass(frozen=True)
class RunReport:
    outcomes: List[StepOutcome]

    def _with(self, status: StepStatus) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status is status]

    @property
    def completed(self) -> List[str]:
        return self._with(StepStatus.COMPLETED)

    @property
    def declined(self) -> List[str]:
        return self._with(StepStatus.DECLINED)

    @property
    def failed(self) -> List[str]:
        return self._with(StepStatus.FAILED)

    @property
    def status(self) -> str:
        n = len(self.failed)
        if not n:
            return "completed"
        return f"completed with {n} failure{'s' if n != 1 else ''}"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "completed": self.completed,
            "declined": self.declined,
            "failed": self.failed,
            "steps": [o.as_dict() for o in self.outcomes],
        }


class Presenter(Protocol):
    """Everything user-facing; the sequencer only sees resolved answers."""

    def confirm(self, step: Step) -> bool:
        ...

    def ask_params(self, step: Step, options: Mapping[str, Sequence[str]]) -> Dict[str, Any]:
        ...

    def task(self, message: str) -> ContextManager[None]:
        ...

    def notify(self, outcome: StepOutcome) -> None:
        ...


def run_sequence(
    *,
    steps: Sequence[Step],
    ctx: StepContext,
    presenter: Presenter,
    only: Optional[Sequence[str]] = None,
    skip: Optional[Sequence[str]] = None,
) -> RunReport:
    """Run steps in order; a failed step is recorded and the run moves on."""

    outcomes: List[StepOutcome] = []

    for step in steps:
        outcome = StepOutcome(step_id=step.step_id)
        outcomes.append(outcome)

        selected = (not only or step.step_id in only) and step.step_id not in (skip or ())
        if not selected or (step.prompt is not None and not presenter.confirm(step)):
            logger.info("Declined step %s", step.step_id)
            outcome.status = StepStatus.DECLINED
            presenter.notify(outcome)
            continue

        logger.info("Running step %s", step.step_id)
        outcome.status = StepStatus.RUNNING
        run = StepRun(ctx, step.step_id, task=presenter.task)
        try:
            run.options = {k: list(v) for k, v in step.probe(run).items()}
            run.params = presenter.ask_params(step, run.options)
            step.run(run)
            outcome.status = StepStatus.COMPLETED
        except Exception as e:
            logger.exception("Step %s failed", step.step_id)
            outcome.status = StepStatus.FAILED
            outcome.error = str(e)
        outcome.warnings = run.warnings
        outcome.results = run.results
        presenter.notify(outcome)

    report = RunReport(outcomes=outcomes)
    logger.info(
        "Run %s (completed=%s declined=%s failed=%s)",
        report.status,
        ",".join(report.completed),
        ",".join(report.declined),
        ",".join(report.failed),
    )
    return report
