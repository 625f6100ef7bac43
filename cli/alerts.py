"""
Alert CLI commands.

Provides ``show`` (live alert on the real clock), ``demo``, ``watch-unsaved``
and ``run-scenario`` (scripted alerts on virtual time).

Updates: v0.1.2 - 2026-10-15 - Added scenario commands alongside the live show command.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from alerts import AlertOptions, AlertProvider, AlertSeverity, AlertView, ManualClock, ScenarioError, use_alert
from alerts.scenario import ScenarioResult, ScenarioRunner, demo_steps, load_scenario, unsaved_changes_steps

logger = logging.getLogger(__name__)

SEVERITY_CHOICES = [severity.value for severity in AlertSeverity]


def run_until_hidden(
    provider: AlertProvider,
    timeout_ms: float,
    poll_interval_ms: float,
    sleep: Optional[Callable[[float], None]] = None,
) -> bool:
    """Fire due timers until the alert is hidden or the timeout passes.

    Returns True when the alert went away on its own.
    """
    sleep = sleep or time.sleep
    timers = provider.timers
    deadline = timers.now() + max(0.0, timeout_ms)

    while True:
        timers.run_due()
        if not provider.store.state.is_visible:
            return True

        remaining = deadline - timers.now()
        if remaining <= 0:
            return False

        wait_ms = min(remaining, max(1.0, poll_interval_ms))
        next_due = timers.next_due_in()
        if next_due is not None:
            wait_ms = min(wait_ms, next_due)
        sleep(max(0.0, wait_ms) / 1000.0)


def _render_result(console: Console, title: str, result: ScenarioResult, extra: Optional[str] = None) -> None:
    table = Table(title=title, show_lines=False, expand=False)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_row("Steps run", str(result.steps_run))
    table.add_row("Expectations checked", str(result.expectations_checked))
    if extra:
        table.add_row("Notes", extra)
    console.print(table)


def register(cli_group: click.Group, *, console: Console, config) -> None:
    """Register alert commands on the root Click group."""

    def _scenario_runner(echo: bool) -> ScenarioRunner:
        provider = AlertProvider(config, clock=ManualClock())
        return ScenarioRunner(
            provider,
            console=console,
            unsaved_collapse_delay=config.unsaved_collapse_delay_ms,
            echo=echo,
        )

    @cli_group.command("show")
    @click.argument("message")
    @click.option(
        "--severity",
        "-s",
        type=click.Choice(SEVERITY_CHOICES, case_sensitive=False),
        default="info",
        show_default=True,
        help="Alert severity.",
    )
    @click.option("--auto-close", "auto_close", type=float, default=None, help="Auto-close delay in milliseconds.")
    @click.option("--collapsible", is_flag=True, help="Collapse the alert after the collapse delay.")
    @click.option("--collapse-delay", type=float, default=None, help="Collapse delay in milliseconds.")
    @click.option(
        "--timeout",
        type=float,
        default=10.0,
        show_default=True,
        help="Stop watching after this many seconds.",
    )
    @click.pass_context
    def show(
        ctx: click.Context,
        message: str,
        severity: str,
        auto_close: Optional[float],
        collapsible: bool,
        collapse_delay: Optional[float],
        timeout: float,
    ) -> None:
        """Show an alert and follow its timed transitions."""
        provider: AlertProvider = ctx.obj["provider"]
        access = use_alert(provider)

        def _on_change(renderable) -> None:
            if renderable is None:
                console.print("[dim](alert dismissed)[/dim]")
            else:
                console.print(renderable)

        view = AlertView(access, console=console, on_change=_on_change).mount()
        try:
            access.show_alert(
                message,
                severity,
                AlertOptions(
                    collapsible=collapsible,
                    collapse_delay=collapse_delay,
                    auto_close_delay=auto_close,
                ),
            )
        except ValueError as exc:
            view.unmount()
            console.print(f"[red]❌ {exc}[/red]")
            ctx.exit(1)

        try:
            closed = run_until_hidden(provider, timeout * 1000.0, config.poll_interval_ms)
        except KeyboardInterrupt:  # pragma: no cover - user interruption
            closed = False
        finally:
            view.unmount()

        if not closed:
            console.print("[yellow]⏱️  Stopped watching; alert still visible.[/yellow]")

    @cli_group.command("demo")
    def demo() -> None:
        """Run the alert demo walk-through on virtual time."""
        runner = _scenario_runner(echo=True)
        try:
            result = runner.run(
                demo_steps(
                    info_auto_close=config.info_auto_close_ms,
                    edit_collapse_delay=config.default_collapse_delay_ms,
                )
            )
        finally:
            runner.close()
        _render_result(console, "Alert Demo", result)

    @cli_group.command("watch-unsaved")
    def watch_unsaved() -> None:
        """Walk a plan edit session through the unsaved-changes watcher."""
        runner = _scenario_runner(echo=True)
        try:
            result = runner.run(unsaved_changes_steps(collapse_delay=config.unsaved_collapse_delay_ms))
            show_calls = runner.watcher.show_calls
        finally:
            runner.close()
        _render_result(console, "Unsaved Changes Watcher", result, extra=f"show_alert calls: {show_calls}")

    @cli_group.command("run-scenario")
    @click.argument("scenario_file", type=click.Path(path_type=Path))
    @click.option("--quiet", "-q", is_flag=True, help="Only print the summary.")
    @click.pass_context
    def run_scenario(ctx: click.Context, scenario_file: Path, quiet: bool) -> None:
        """Run a YAML alert scenario."""
        try:
            steps = load_scenario(scenario_file)
        except (ScenarioError, OSError) as exc:
            console.print(f"[red]❌ Unable to load scenario: {exc}[/red]")
            ctx.exit(1)

        runner = _scenario_runner(echo=not quiet)
        try:
            result = runner.run(steps)
        except ScenarioError as exc:
            logger.error("Scenario %s failed: %s", scenario_file, exc)
            console.print(Panel.fit(str(exc), title="Scenario Failed", border_style="red"))
            ctx.exit(1)
        finally:
            runner.close()

        _render_result(console, "Scenario", result)
        console.print(f"[green]✅ Scenario passed: {scenario_file.name}[/green]")
