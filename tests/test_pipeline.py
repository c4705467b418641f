"""Tests for the provisioning sequencer."""

from kiosk_installer.lib.directives import AppendDirective, LineTokenDirective, Outcome
from kiosk_installer.pipeline import BaseStep, Param, RunReport, StepOutcome, StepStatus, run_sequence

from tests.conftest import ScriptedPresenter, make_run


class RecordingStep(BaseStep):
    def __init__(self, step_id, *, prompt="Run it?", default=True, fail=False, calls=None):
        self.step_id = step_id
        self.prompt = prompt
        self.default = default
        self.fail = fail
        self.calls = calls if calls is not None else []

    def run(self, run):
        self.calls.append(self.step_id)
        if self.fail:
            raise RuntimeError(f"{self.step_id} exploded")


def test_failure_does_not_halt_sequence(ctx):
    calls = []
    steps = [
        RecordingStep("s1", fail=True, calls=calls),
        RecordingStep("s2", calls=calls),
        RecordingStep("s3", calls=calls),
    ]
    presenter = ScriptedPresenter()

    report = run_sequence(steps=steps, ctx=ctx, presenter=presenter)

    assert calls == ["s1", "s2", "s3"]
    assert report.failed == ["s1"]
    assert report.completed == ["s2", "s3"]
    assert report.status == "completed with 1 failure"
    assert report.outcomes[0].error == "s1 exploded"
    assert [o.step_id for o in presenter.notified] == ["s1", "s2", "s3"]


def test_status_pluralises():
    report = RunReport(
        outcomes=[StepOutcome("a", StepStatus.FAILED), StepOutcome("b", StepStatus.FAILED)]
    )

    assert report.status == "completed with 2 failures"
    assert RunReport(outcomes=[]).status == "completed"


def test_declined_step_never_runs(ctx):
    calls = []
    steps = [RecordingStep("s1", calls=calls), RecordingStep("s2", default=False, calls=calls)]

    report = run_sequence(steps=steps, ctx=ctx, presenter=ScriptedPresenter(answers={"s1": False}))

    assert calls == []
    assert report.declined == ["s1", "s2"]


def test_ungated_step_is_not_asked(ctx):
    calls = []
    presenter = ScriptedPresenter()

    run_sequence(steps=[RecordingStep("cleanup", prompt=None, calls=calls)], ctx=ctx, presenter=presenter)

    assert calls == ["cleanup"]
    assert presenter.asked == []


def test_only_and_skip(ctx):
    calls = []
    steps = [RecordingStep(s, calls=calls) for s in ("a", "b", "c")]
    presenter = ScriptedPresenter()

    report = run_sequence(steps=steps, ctx=ctx, presenter=presenter, only=["a", "b"], skip=["b"])

    assert calls == ["a"]
    assert report.declined == ["b", "c"]
    assert presenter.asked == ["a"]


class ProbingStep(BaseStep):
    step_id = "probing"
    prompt = "Pick?"
    params = (Param("mode", "Mode", kind="choice"),)

    def __init__(self):
        self.seen = None

    def probe(self, run):
        return {"mode": ("1920x1080@60", "1280x720@60")}

    def run(self, run):
        self.seen = (run.options, run.params)


def test_probe_options_reach_presenter_and_step(ctx):
    step = ProbingStep()
    presenter = ScriptedPresenter()

    run_sequence(steps=[step], ctx=ctx, presenter=presenter)

    assert presenter.options["probing"] == {"mode": ["1920x1080@60", "1280x720@60"]}
    assert step.seen == ({"mode": ["1920x1080@60", "1280x720@60"]}, {"mode": "1920x1080@60"})


class EditingStep(BaseStep):
    step_id = "editing"
    prompt = None

    def __init__(self, autostart, cmdline):
        self.autostart = autostart
        self.cmdline = cmdline

    def run(self, run):
        run.apply(AppendDirective(path=self.autostart, payload="x &"))
        run.apply(LineTokenDirective(path=self.cmdline, tokens=("quiet",), create_missing=False))


def test_outcome_collects_results_and_warnings(ctx, temp_dir):
    step = EditingStep(temp_dir / "autostart", temp_dir / "cmdline.txt")

    report = run_sequence(steps=[step], ctx=ctx, presenter=ScriptedPresenter())

    outcome = report.outcomes[0]
    assert outcome.status is StepStatus.COMPLETED
    assert [r.outcome for r in outcome.results] == [Outcome.CREATED, Outcome.SKIPPED_WITH_WARNING]
    assert outcome.warnings == [f"{temp_dir / 'cmdline.txt'} not found"]

    data = report.as_dict()
    assert data["status"] == "completed"
    assert data["steps"][0]["results"][0]["outcome"] == "created"


def test_step_run_warn(ctx):
    run = make_run(ctx, "x")

    run.warn("careful")

    assert run.warnings == ["careful"]
    assert not run.dry_run
