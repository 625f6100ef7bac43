"""
Exception types raised by the alert subsystem.
"""

from __future__ import annotations

from typing import Optional


class AlertError(Exception):
    """Base class for alert subsystem errors."""


class AlertProviderError(AlertError, RuntimeError):
    """Raised when alert access is requested without a provider."""


class ScenarioError(AlertError):
    """Raised when a scenario file is malformed or an expectation fails."""

    def __init__(self, message: str, step: Optional[int] = None):
        self.step = step
        if step is not None:
            message = f"Step {step}: {message}"
        super().__init__(message)
