"""Presenters: how step questions reach the user.

- AnswersPresenter: unattended; pre-recorded answers from the config file,
  step defaults otherwise (``--yes``)
- InteractivePresenter: questionary prompts on a TTY, click prompts as the
  fallback for piped/headless stdin

Pre-recorded answers win in both presenters, so a config file can pin some
steps and leave the rest interactive.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, ContextManager, Dict, List, Mapping, Optional, Sequence, Tuple

import click
import questionary
from rich.console import Console

from ..config import KioskConfig
from ..pipeline import Param, Step, StepOutcome, StepStatus
from .progress import task_status

logger = logging.getLogger(__name__)

_STATUS_STYLE = {
    StepStatus.COMPLETED: ("✔", "green"),
    StepStatus.DECLINED: ("-", "bright_black"),
    StepStatus.FAILED: ("✘", "red"),
}


def param_choices(param: Param, options: Mapping[str, Sequence[str]]) -> List[Tuple[str, str]]:
    """(title, value) pairs: probed options first, static choices otherwise."""

    probed = options.get(param.name)
    if probed:
        return [(str(v), str(v)) for v in probed]
    return list(param.choices)


def coerce_param(param: Param, value: Any, choices: Sequence[Tuple[str, str]]) -> Any:
    if param.kind == "confirm":
        if isinstance(value, str):
            return value.strip().lower() in {"y", "yes", "true", "1"}
        return bool(value)
    if param.kind == "int":
        return int(value)
    if param.kind == "choice":
        values = [v for _, v in choices]
        value = None if value is None else str(value)
        if value not in values:
            if value is not None:
                logger.warning("%s: %r is not one of %s; using %s", param.name, value, values, values[0])
            return values[0] if values else param.default
        return value
    return "" if value is None else str(value)


class AnswersPresenter:
    def __init__(self, config: KioskConfig, *, console: Optional[Console] = None) -> None:
        self.config = config
        self.console = console

    def confirm(self, step: Step) -> bool:
        answer = self.config.answer(step.step_id)
        decided = step.default if answer is None else answer
        logger.info("%s -> %s", step.prompt, "yes" if decided else "no")
        return decided

    def _ask(self, param: Param, choices: Sequence[Tuple[str, str]]) -> Any:
        return param.default

    def ask_params(self, step: Step, options: Mapping[str, Sequence[str]]) -> Dict[str, Any]:
        recorded = self.config.params(step.step_id)
        values: Dict[str, Any] = {}
        for param in step.params:
            choices = param_choices(param, options)
            if param.when and not values.get(param.when):
                raw = param.default
            elif param.name in recorded:
                raw = recorded[param.name]
            else:
                raw = self._ask(param, choices)
            values[param.name] = coerce_param(param, raw, choices)
            logger.info("%s: %s = %r", step.step_id, param.name, values[param.name])
        return values

    def task(self, message: str) -> ContextManager[None]:
        return task_status(message, console=self.console)

    def notify(self, outcome: StepOutcome) -> None:
        mark, color = _STATUS_STYLE.get(outcome.status, ("?", "yellow"))
        click.secho(f"{mark} {outcome.step_id}: {outcome.status.value}", fg=color)
        for warning in outcome.warnings:
            click.secho(f"  ! {warning}", fg="yellow")
        if outcome.error:
            click.secho(f"  {outcome.error}", fg="red", err=True)


class InteractivePresenter(AnswersPresenter):
    def __init__(
        self,
        config: KioskConfig,
        *,
        console: Optional[Console] = None,
        tty: Optional[bool] = None,
    ) -> None:
        super().__init__(config, console=console)
        self.tty = sys.stdin.isatty() if tty is None else tty

    def confirm(self, step: Step) -> bool:
        answer = self.config.answer(step.step_id)
        if answer is not None:
            return answer

        click.echo("")
        if self.tty:
            decided = questionary.confirm(step.prompt or step.step_id, default=step.default).ask()
            if decided is None:
                # questionary returns None on Ctrl-C.
                raise KeyboardInterrupt
        else:
            decided = click.confirm(step.prompt or step.step_id, default=step.default)
        logger.info("%s -> %s", step.prompt, "yes" if decided else "no")
        return bool(decided)

    def _ask(self, param: Param, choices: Sequence[Tuple[str, str]]) -> Any:
        if self.tty:
            return self._ask_questionary(param, choices)
        return self._ask_click(param, choices)

    def _ask_questionary(self, param: Param, choices: Sequence[Tuple[str, str]]) -> Any:
        if param.kind == "confirm":
            q = questionary.confirm(param.prompt, default=bool(param.default))
        elif param.kind == "choice":
            values = [v for _, v in choices]
            q = questionary.select(
                param.prompt,
                choices=[questionary.Choice(title=t, value=v) for t, v in choices],
                default=param.default if param.default in values else None,
            )
        elif param.kind == "int":
            q = questionary.text(
                param.prompt,
                default=str(param.default or ""),
                validate=lambda s: s.strip().isdigit() or "Please enter a whole number",
            )
        else:
            q = questionary.text(param.prompt, default=str(param.default or ""))

        answer = q.ask()
        if answer is None:
            raise KeyboardInterrupt
        return answer

    def _ask_click(self, param: Param, choices: Sequence[Tuple[str, str]]) -> Any:
        if param.kind == "confirm":
            return click.confirm(param.prompt, default=bool(param.default))
        if param.kind == "choice":
            values = [v for _, v in choices]
            for i, (title, _) in enumerate(choices, start=1):
                click.echo(f"  {i}) {title}")
            default = param.default if param.default in values else values[0]
            picked = click.prompt(param.prompt, type=click.Choice(values), default=default)
            return picked
        if param.kind == "int":
            return click.prompt(param.prompt, type=int, default=param.default)
        return click.prompt(param.prompt, default=param.default)
