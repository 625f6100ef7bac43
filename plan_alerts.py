#!/usr/bin/env python3
"""
Plan Alerts CLI
Terminal front end for the training-plan global alert system

Updates: v0.1.0 - 2026-10-12 - Added show, demo and diagnostics commands.
Updates: v0.1.2 - 2026-10-15 - Added scenario and unsaved-changes commands.
"""

import logging
import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from alerts import AlertProvider
from config import Config
from utils.logger import setup_logging

from cli import alerts as alert_commands

# Load environment variables
load_dotenv()

console = Console()
config = Config()
logger = logging.getLogger(__name__)

# Log to file only; alert panels own the terminal.
setup_logging(log_level=config.log_level, log_file=config.log_file, console=False)


def _get_active_log_level() -> str:
    """Return the currently configured logging level name."""
    level = logging.getLogger().getEffectiveLevel()
    return logging.getLevelName(level)


def _render_diagnostics(console: Console, config_obj: Config) -> None:
    """Display resolved settings and where they came from."""
    summary = Table(title="Alert Settings", show_lines=False, expand=False)
    summary.add_column("Setting", style="cyan", no_wrap=True)
    summary.add_column("Value", style="green")
    summary.add_column("Source", style="white")

    sources = {
        "default_collapse_delay_ms": "PLAN_ALERTS_DEFAULT_COLLAPSE_DELAY_MS",
        "unsaved_collapse_delay_ms": "PLAN_ALERTS_UNSAVED_COLLAPSE_DELAY_MS",
        "info_auto_close_ms": "PLAN_ALERTS_INFO_AUTO_CLOSE_MS",
        "poll_interval_ms": "PLAN_ALERTS_POLL_INTERVAL_MS",
        "log_level": "PLAN_ALERTS_LOG_LEVEL",
        "log_file": "PLAN_ALERTS_LOG_FILE",
    }
    for name, value in config_obj.summary().items():
        env_key = sources.get(name)
        if env_key is None:
            source = "-"
        elif os.getenv(env_key):
            source = f"env: {env_key}"
        else:
            source = "config.json / default"
        summary.add_row(name, str(value), source)

    console.print(summary)

    env_path = Path(".env")
    console.print(
        Panel.fit(
            "\n".join(
                [
                    f"• .env file: {env_path.resolve()} ({'found' if env_path.exists() else 'missing'})",
                    f"• config.json: {config_obj.config_file} "
                    f"({'found' if config_obj.config_file.exists() else 'missing'})",
                    f"• Active log level: {_get_active_log_level()}",
                ]
            ),
            title="Environment Checks",
            border_style="blue",
        )
    )


@click.group()
@click.pass_context
def cli(ctx):
    """Plan Alerts CLI - single-slot alerts with auto-close and collapse"""
    ctx.ensure_object(dict)
    ctx.obj['config'] = config
    provider = AlertProvider(config)
    ctx.obj['provider'] = provider
    ctx.call_on_close(provider.close)


alert_commands.register(
    cli,
    console=console,
    config=config,
)


@cli.command()
@click.option(
    "--diagnostics",
    is_flag=True,
    help="Display resolved settings and environment checks.",
)
def info(diagnostics: bool):
    """Show application information"""
    if diagnostics:
        _render_diagnostics(console, config)
        return

    panel = Panel.fit(
        "[bold cyan]Plan Alerts CLI[/bold cyan]\n\n"
        f"[bold white]Current Log Level:[/bold white] [cyan]{_get_active_log_level()}[/cyan]\n\n"
        "[bold green]Severities:[/bold green] info, warning, error, edit\n\n"
        "[bold blue]Commands:[/bold blue]\n"
        "• show MESSAGE - display an alert and follow its timers\n"
        "• demo - scripted walk-through on virtual time\n"
        "• watch-unsaved - unsaved-changes watcher walk-through\n"
        "• run-scenario FILE - run a YAML scenario",
        title="Application Information",
    )
    console.print(panel)


if __name__ == '__main__':
    cli()
