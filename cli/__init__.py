"""
CLI command registration helpers for the plan alerts CLI.

Each submodule exposes a ``register`` function that attaches a group of
related commands to the root Click group defined in ``plan_alerts.py``.
"""

__all__ = ["alerts"]
