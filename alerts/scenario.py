"""
Scripted alert interactions on virtual time.

A scenario is a list of single-key steps (``show``, ``hide``, ``dismiss``,
``hover``, ``leave``, ``advance``, ``plan``, ``expect``, ``snapshot``) loaded
from YAML. Steps run against a provider driven by a ``ManualClock`` so timed
transitions are reproducible.

Updates: v0.1.2 - 2026-10-15 - Added YAML scenario runner and built-in demo scripts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import yaml
from rich.console import Console

from alerts.access import AlertProvider, use_alert
from alerts.errors import ScenarioError
from alerts.models import AlertAction, AlertOptions
from alerts.producers import DEFAULT_UNSAVED_COLLAPSE_DELAY_MS, UnsavedChangesWatcher
from alerts.timers import ManualClock
from alerts.view import AlertView

logger = logging.getLogger(__name__)

DEMO_MESSAGES: Dict[str, str] = {
    "info": "This is an information message.",
    "warning": "Warning! This action may have consequences.",
    "error": "An error occurred while processing your request.",
    "edit": "You are in edit mode. Don't forget to save your changes!",
}


def demo_steps(info_auto_close: float = 5000, edit_collapse_delay: float = 3000) -> List[Dict[str, Any]]:
    """Steps reproducing the alert demo page walk-through."""
    return [
        {"show": {"message": DEMO_MESSAGES["info"], "severity": "info", "auto_close_delay": info_auto_close}},
        {"expect": {"visible": True, "text": DEMO_MESSAGES["info"]}},
        {"advance": info_auto_close},
        {"expect": {"visible": False, "absent": DEMO_MESSAGES["info"]}},
        {"show": {"message": DEMO_MESSAGES["warning"], "severity": "warning"}},
        {"expect": {"text": DEMO_MESSAGES["warning"]}},
        {"show": {"message": DEMO_MESSAGES["error"], "severity": "error"}},
        {"expect": {"text": DEMO_MESSAGES["error"], "absent": DEMO_MESSAGES["warning"]}},
        {"dismiss": None},
        {"expect": {"visible": False}},
        {
            "show": {
                "message": DEMO_MESSAGES["edit"],
                "severity": "edit",
                "collapsible": True,
                "collapse_delay": edit_collapse_delay,
            }
        },
        {"expect": {"text": DEMO_MESSAGES["edit"], "collapsed": False}},
        {"advance": edit_collapse_delay},
        {"expect": {"visible": True, "collapsed": True, "absent": DEMO_MESSAGES["edit"]}},
        {"hover": None},
        {"expect": {"collapsed": False, "text": DEMO_MESSAGES["edit"]}},
        {"leave": None},
        {"expect": {"collapsed": True, "absent": DEMO_MESSAGES["edit"]}},
        {"hide": None},
        {"expect": {"visible": False}},
    ]


def unsaved_changes_steps(collapse_delay: float = DEFAULT_UNSAVED_COLLAPSE_DELAY_MS) -> List[Dict[str, Any]]:
    """Steps walking a plan edit session through the unsaved-changes watcher."""
    plan = {"mode": "edit", "original_plan_id": "42", "plan_name": "Marathon Base Block"}
    return [
        {"plan": dict(plan, pathname="/plan/42/edit", has_unsaved_changes=True)},
        {"expect": {"visible": False}},
        {"plan": dict(plan, pathname="/plans", has_unsaved_changes=True)},
        {"expect": {"visible": True, "text": 'You have unsaved changes on "Marathon Base Block".'}},
        {"plan": dict(plan, pathname="/plans/archive", has_unsaved_changes=True)},
        {"advance": collapse_delay},
        {"expect": {"collapsed": True}},
        {"hover": None},
        {"expect": {"text": "Edit Plan"}},
        {"leave": None},
        {"plan": dict(plan, pathname="/plan/42/edit", has_unsaved_changes=True)},
        {"expect": {"visible": False}},
    ]


@dataclass
class ScenarioFrame:
    """Rendered output captured after a step."""

    index: int
    step: str
    text: str


@dataclass
class ScenarioResult:
    steps_run: int = 0
    expectations_checked: int = 0
    frames: List[ScenarioFrame] = field(default_factory=list)


def load_scenario(path: Path) -> List[Dict[str, Any]]:
    """Load scenario steps from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ScenarioError(f"Invalid YAML in {path}: {exc}") from exc

    if isinstance(payload, Mapping):
        steps = payload.get("steps")
    else:
        steps = payload
    if not isinstance(steps, list):
        raise ScenarioError("Scenario must provide a list under 'steps'.")
    return steps


class ScenarioRunner:
    """Execute scenario steps against a virtual-time alert provider."""

    def __init__(
        self,
        provider: Optional[AlertProvider] = None,
        *,
        console: Optional[Console] = None,
        unsaved_collapse_delay: Optional[float] = DEFAULT_UNSAVED_COLLAPSE_DELAY_MS,
        echo: bool = False,
    ):
        self.clock = ManualClock()
        self.provider = provider or AlertProvider(clock=self.clock)
        if not isinstance(self.provider.timers.clock, ManualClock):
            raise ScenarioError("Scenarios require a provider driven by a ManualClock.")
        self.clock = self.provider.timers.clock

        self.access = use_alert(self.provider)
        self.console = console or Console()
        self.view = AlertView(self.access, console=self.console).mount()
        self.watcher = UnsavedChangesWatcher(self.access, collapse_delay=unsaved_collapse_delay)
        self.echo = echo

        self._handlers: Dict[str, Callable[[Any, int], None]] = {
            "show": self._step_show,
            "hide": lambda _arg, _index: self.access.hide_alert(),
            "dismiss": lambda _arg, _index: self.view.dismiss(),
            "hover": lambda _arg, _index: self.view.pointer_enter(),
            "leave": lambda _arg, _index: self.view.pointer_leave(),
            "advance": self._step_advance,
            "plan": lambda arg, _index: self.watcher.update(arg),
            "snapshot": lambda _arg, _index: None,
        }

    def run(self, steps: Sequence[Any]) -> ScenarioResult:
        result = ScenarioResult()
        for index, raw_step in enumerate(steps, start=1):
            name, argument = self._parse_step(raw_step, index)
            if name == "expect":
                self._check(argument, index)
                result.expectations_checked += 1
            else:
                self._handlers[name](argument, index)
                frame = ScenarioFrame(index=index, step=name, text=self.view.visible_text())
                result.frames.append(frame)
                if self.echo:
                    self._echo(frame)
            result.steps_run += 1

        logger.info(
            "Scenario finished: %d step(s), %d expectation(s), t=%.0fms",
            result.steps_run,
            result.expectations_checked,
            self.clock.now,
        )
        return result

    def close(self) -> None:
        self.view.unmount()
        self.provider.close()

    def _parse_step(self, raw_step: Any, index: int) -> tuple[str, Any]:
        if isinstance(raw_step, str):
            raw_step = {raw_step: None}
        if not isinstance(raw_step, Mapping) or len(raw_step) != 1:
            raise ScenarioError("Each step must be a mapping with exactly one action.", step=index)
        name, argument = next(iter(raw_step.items()))
        if name != "expect" and name not in self._handlers:
            raise ScenarioError(f"Unknown step '{name}'.", step=index)
        return name, argument

    def _step_show(self, argument: Any, index: int) -> None:
        if isinstance(argument, str):
            argument = {"message": argument}
        if not isinstance(argument, Mapping):
            raise ScenarioError("'show' expects a mapping or a message string.", step=index)

        action = None
        action_data = argument.get("action")
        if isinstance(action_data, Mapping):
            action = AlertAction(label=str(action_data.get("label", "")), href=str(action_data.get("href", "")))

        options = AlertOptions(
            collapsible=bool(argument.get("collapsible", False)),
            collapse_delay=self._optional_number(argument.get("collapse_delay"), "collapse_delay", index),
            auto_close_delay=self._optional_number(argument.get("auto_close_delay"), "auto_close_delay", index),
            action=action,
        )
        try:
            self.access.show_alert(
                argument.get("message"),
                argument.get("severity", "info"),
                options,
                key=argument.get("key"),
            )
        except ValueError as exc:
            raise ScenarioError(str(exc), step=index) from exc

    def _step_advance(self, argument: Any, index: int) -> None:
        milliseconds = self._optional_number(argument, "advance", index)
        if milliseconds is None or milliseconds < 0:
            raise ScenarioError("'advance' expects a non-negative number of milliseconds.", step=index)
        self.provider.timers.advance(milliseconds)

    def _check(self, expected: Any, index: int) -> None:
        if not isinstance(expected, Mapping):
            raise ScenarioError("'expect' requires a mapping.", step=index)

        state = self.access.alert_state
        text = self.view.visible_text()

        if "visible" in expected and bool(expected["visible"]) != state.is_visible:
            raise ScenarioError(
                f"expected visible={bool(expected['visible'])}, got {state.is_visible}", step=index
            )
        if "collapsed" in expected and bool(expected["collapsed"]) != state.is_collapsed:
            raise ScenarioError(
                f"expected collapsed={bool(expected['collapsed'])}, got {state.is_collapsed}", step=index
            )
        if "text" in expected and str(expected["text"]) not in text:
            raise ScenarioError(f"expected text {expected['text']!r} to be visible", step=index)
        if "absent" in expected and str(expected["absent"]) in text:
            raise ScenarioError(f"expected text {expected['absent']!r} not to be visible", step=index)

    @staticmethod
    def _optional_number(value: Any, name: str, index: int) -> Optional[float]:
        if value is None:
            return None
        if isinstance(value, bool):
            raise ScenarioError(f"'{name}' must be a number.", step=index)
        try:
            return float(value)
        except (TypeError, ValueError) as exc:
            raise ScenarioError(f"'{name}' must be a number.", step=index) from exc

    def _echo(self, frame: ScenarioFrame) -> None:
        self.console.print(f"[dim]t={self.clock.now:.0f}ms · step {frame.index}: {frame.step}[/dim]")
        renderable = self.view.render()
        if renderable is None:
            self.console.print("[dim](no alert)[/dim]")
        else:
            self.console.print(renderable)
