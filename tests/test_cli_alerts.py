"""CLI tests for the alert commands."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

import plan_alerts
from alerts import AlertOptions, AlertProvider, ManualClock
from cli.alerts import run_until_hidden

SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios"


def test_show_prints_alert_and_stops_on_timeout() -> None:
    runner = CliRunner()

    result = runner.invoke(
        plan_alerts.cli,
        ["show", "Plan saved", "--severity", "info", "--timeout", "0"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "Plan saved" in result.output
    assert "Stopped watching" in result.output


def test_show_follows_auto_close(monkeypatch) -> None:
    clock = ManualClock()
    monkeypatch.setattr(plan_alerts, "AlertProvider", lambda config: AlertProvider(config, clock=clock))
    monkeypatch.setattr("cli.alerts.time.sleep", lambda seconds: clock.advance(seconds * 1000.0))
    runner = CliRunner()

    result = runner.invoke(
        plan_alerts.cli,
        ["show", "Synced", "--auto-close", "1500", "--timeout", "5"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "Synced" in result.output
    assert "(alert dismissed)" in result.output
    assert "Stopped watching" not in result.output


def test_show_rejects_blank_message() -> None:
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["show", "   ", "--timeout", "0"])

    assert result.exit_code == 1
    assert "must not be empty" in result.output


def test_run_until_hidden_uses_next_due_time() -> None:
    clock = ManualClock()
    sleeps: list[float] = []

    def _sleep(seconds: float) -> None:
        sleeps.append(seconds)
        clock.advance(seconds * 1000.0)

    with AlertProvider(clock=clock) as provider:
        provider.store.show_alert("Closing", "info", AlertOptions(auto_close_delay=250))
        closed = run_until_hidden(provider, timeout_ms=10_000, poll_interval_ms=100, sleep=_sleep)

    assert closed is True
    assert sleeps == [0.1, 0.1, 0.05]


def test_demo_command_runs_walkthrough() -> None:
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["demo"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "This is an information message." in result.output
    assert "Alert Demo" in result.output


def test_watch_unsaved_reports_single_show_call() -> None:
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["watch-unsaved"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "show_alert calls: 1" in result.output


def test_run_scenario_with_bundled_file() -> None:
    runner = CliRunner()

    result = runner.invoke(
        plan_alerts.cli,
        ["run-scenario", str(SCENARIO_DIR / "collapsible_alerts.yaml"), "--quiet"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert "collapsible_alerts.yaml" in result.output


def test_run_scenario_reports_failures(tmp_path) -> None:
    scenario = tmp_path / "broken.yaml"
    scenario.write_text("steps:\n  - show: Hello\n  - expect: {visible: false}\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["run-scenario", str(scenario), "-q"])

    assert result.exit_code == 1
    assert "Scenario Failed" in result.output


def test_run_scenario_missing_file() -> None:
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["run-scenario", "does-not-exist.yaml"])

    assert result.exit_code == 1
    assert "Unable to load scenario" in result.output


def test_info_diagnostics_lists_settings() -> None:
    runner = CliRunner()

    result = runner.invoke(plan_alerts.cli, ["info", "--diagnostics"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "default_collapse_delay_ms" in result.output
    assert "Environment Checks" in result.output
