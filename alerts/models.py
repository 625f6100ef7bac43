"""
Alert data model: severity levels, per-call options and the state snapshot.

Updates: v0.1.0 - 2026-10-12 - Introduced frozen alert state and option types.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Optional

from rich.console import RenderableType


class AlertSeverity(str, Enum):
    """Severity of an alert; drives icon, colour and title."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    EDIT = "edit"

    @classmethod
    def coerce(cls, value: Any) -> "AlertSeverity":
        """Return a severity for ``value``, falling back to INFO for unknown input."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.INFO
        return cls.INFO

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value.strip().lower() in {item.value for item in cls}


@dataclass(frozen=True)
class AlertAction:
    """Call-to-action shown next to the alert message."""

    label: str
    href: str


@dataclass(frozen=True)
class AlertOptions:
    """Presentation options for a single alert. Delays are in milliseconds."""

    collapsible: bool = False
    collapse_delay: Optional[float] = None
    auto_close_delay: Optional[float] = None
    action: Optional[AlertAction] = None

    @staticmethod
    def has_delay(value: Optional[float]) -> bool:
        """True when ``value`` describes a timer that should be scheduled."""
        return value is not None and value > 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AlertOptions":
        """Build options from a plain mapping such as ``{"auto_close_delay": 5000}``."""
        unknown = set(data) - {item.name for item in fields(cls)}
        if unknown:
            raise TypeError(f"Unknown alert option(s): {', '.join(sorted(unknown))}")
        action = data.get("action")
        if isinstance(action, Mapping):
            action = AlertAction(label=str(action.get("label", "")), href=str(action.get("href", "")))
        return cls(
            collapsible=bool(data.get("collapsible", False)),
            collapse_delay=data.get("collapse_delay"),
            auto_close_delay=data.get("auto_close_delay"),
            action=action,
        )


@dataclass(frozen=True)
class AlertState:
    """Snapshot of the single alert slot."""

    is_visible: bool = False
    message: RenderableType = ""
    severity: AlertSeverity = AlertSeverity.INFO
    options: AlertOptions = field(default_factory=AlertOptions)
    is_collapsed: bool = False
    alert_id: int = 0
    key: Optional[str] = None

    def matches(self, key: Optional[str], severity: AlertSeverity) -> bool:
        """Return True when a visible alert carries the given content key and severity."""
        return self.is_visible and key is not None and self.key == key and self.severity == severity

    def message_text(self) -> str:
        """Plain-text form of the message for logging and aria labels."""
        if isinstance(self.message, str):
            return self.message
        plain = getattr(self.message, "plain", None)
        if isinstance(plain, str):
            return plain
        return ""


EMPTY_ALERT_STATE = AlertState()
