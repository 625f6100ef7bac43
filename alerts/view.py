"""
Rich presentation of the current alert.

The view is purely reactive: it renders whatever the store holds and turns
pointer and dismiss interactions into store calls. The only state it keeps is
whether the pointer is over the alert.

Updates: v0.1.0 - 2026-10-13 - Added collapsed badge and expanded panel rendering.
"""

from __future__ import annotations

import io
import logging
from typing import Callable, Dict, Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from alerts.access import AlertAccess, AlertSubscription
from alerts.models import AlertSeverity, AlertState

logger = logging.getLogger(__name__)

RenderCallback = Callable[[Optional[RenderableType]], None]


class AlertView:
    """Render the alert slot and route user interaction back to the store."""

    ROLE = "alert"
    DISMISS_LABEL = "Dismiss alert"

    ICON_MAP: Dict[AlertSeverity, str] = {
        AlertSeverity.INFO: "ℹ️",
        AlertSeverity.WARNING: "⚠️",
        AlertSeverity.ERROR: "⛔",
        AlertSeverity.EDIT: "✏️",
    }

    STYLE_MAP: Dict[AlertSeverity, str] = {
        AlertSeverity.INFO: "cyan",
        AlertSeverity.WARNING: "yellow",
        AlertSeverity.ERROR: "red",
        AlertSeverity.EDIT: "magenta",
    }

    TITLE_MAP: Dict[AlertSeverity, str] = {
        AlertSeverity.INFO: "Information",
        AlertSeverity.WARNING: "Warning",
        AlertSeverity.ERROR: "Error",
        AlertSeverity.EDIT: "Editing Mode",
    }

    def __init__(
        self,
        access: AlertAccess,
        console: Optional[Console] = None,
        on_change: Optional[RenderCallback] = None,
    ):
        self._access = access
        self._console = console or Console()
        self._on_change = on_change
        self._hovered = False
        self._subscription = AlertSubscription(access, self._handle_change)

    @property
    def mounted(self) -> bool:
        return self._subscription.attached

    @property
    def hovered(self) -> bool:
        return self._hovered

    @property
    def state(self) -> AlertState:
        return self._access.alert_state

    @property
    def role(self) -> Optional[str]:
        """Accessible role of the alert region; None when nothing is shown."""
        return self.ROLE if self.state.is_visible else None

    @property
    def aria_label(self) -> Optional[str]:
        state = self.state
        if not state.is_visible:
            return None
        title = self.TITLE_MAP[state.severity]
        text = state.message_text()
        return f"{title}: {text}" if text else f"{title}: View alert details"

    def mount(self) -> "AlertView":
        """Start observing the store."""
        self._subscription.attach()
        return self

    def unmount(self) -> None:
        """Stop observing the store."""
        self._subscription.detach()
        self._hovered = False

    def dismiss(self) -> None:
        """Handle activation of the dismiss control."""
        self._hovered = False
        logger.debug("Dismiss control activated for alert #%d", self.state.alert_id)
        self._access.hide_alert()

    def pointer_enter(self) -> None:
        self._hovered = True
        if self._is_collapsible():
            self._access.store.expand()

    def pointer_leave(self) -> None:
        self._hovered = False
        if self._is_collapsible():
            self._access.store.collapse_now()

    def render(self) -> Optional[RenderableType]:
        """Return the renderable for the current alert, or None when hidden."""
        state = self.state
        if not state.is_visible:
            return None

        icon = self.ICON_MAP[state.severity]
        style = self.STYLE_MAP[state.severity]

        if state.is_collapsed:
            return Panel(Text(icon), border_style=style, expand=False)

        body = [self._message_renderable(state.message)]
        action = state.options.action
        if action is not None:
            body.append(Text(f"{action.label} → {action.href}", style=f"bold underline {style}"))
        body.append(Text(f"✕ {self.DISMISS_LABEL}", style="dim"))

        return Panel(
            Group(*body),
            title=f"{icon} {self.TITLE_MAP[state.severity]}",
            title_align="left",
            border_style=style,
            expand=False,
        )

    def visible_text(self, width: int = 200) -> str:
        """Plain text a reader would see right now."""
        renderable = self.render()
        if renderable is None:
            return ""
        console = Console(file=io.StringIO(), record=True, width=width, color_system=None)
        console.print(renderable)
        return console.export_text()

    def print(self) -> None:
        renderable = self.render()
        if renderable is not None:
            self._console.print(renderable)

    def _is_collapsible(self) -> bool:
        state = self.state
        return state.is_visible and state.options.collapsible

    @staticmethod
    def _message_renderable(message: RenderableType) -> RenderableType:
        if isinstance(message, str):
            return Text(message)
        return message

    def _handle_change(self, state: AlertState) -> None:
        if not state.is_visible:
            self._hovered = False
        if self._on_change is not None:
            self._on_change(self.render())
