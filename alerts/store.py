"""
Single-slot alert store with timed auto-close and collapse transitions.

Updates:
    v0.1.0 - 2026-10-12 - Introduced the alert store replacing per-view alert state.
    v0.1.2 - 2026-10-15 - Apply default collapse delay and content keys for standing alerts.
    v0.1.3 - 2026-10-19 - Accept option mappings, reject blank rich text, ignore calls after close.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional, Union

from rich.console import RenderableType
from rich.text import Text

from alerts.models import EMPTY_ALERT_STATE, AlertOptions, AlertSeverity, AlertState
from alerts.timers import TimerController

logger = logging.getLogger(__name__)

AlertListener = Callable[[AlertState], None]

DEFAULT_COLLAPSE_DELAY_MS = 3000

AUTO_CLOSE_TIMER = "auto-close"
COLLAPSE_TIMER = "collapse"


class AlertStore:
    """Owns the current alert and notifies listeners on every transition."""

    def __init__(
        self,
        timers: Optional[TimerController] = None,
        default_collapse_delay: Optional[float] = DEFAULT_COLLAPSE_DELAY_MS,
    ):
        self._timers = timers or TimerController()
        self._default_collapse_delay = default_collapse_delay
        self._state: AlertState = EMPTY_ALERT_STATE
        self._listeners: List[AlertListener] = []
        self._next_id = 0
        self._closed = False

    @property
    def state(self) -> AlertState:
        return self._state

    @property
    def timers(self) -> TimerController:
        return self._timers

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: AlertListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def listener_count(self) -> int:
        return len(self._listeners)

    def show_alert(
        self,
        message: RenderableType,
        severity: Any = AlertSeverity.INFO,
        options: Union[AlertOptions, Mapping[str, Any], None] = None,
        *,
        key: Optional[str] = None,
    ) -> None:
        """Replace any current alert with a new one and schedule its timers."""
        if self._is_blank(message):
            raise ValueError("Alert message must not be empty.")
        if self._closed:
            logger.warning("Ignoring alert shown after the store was closed.")
            return
        if isinstance(options, Mapping):
            options = AlertOptions.from_mapping(options)
        elif options is not None and not isinstance(options, AlertOptions):
            raise TypeError(f"Alert options must be AlertOptions or a mapping, not {type(options).__name__}.")

        if not AlertSeverity.is_valid(severity):
            logger.warning("Unknown alert severity %r; using info.", severity)
        resolved_severity = AlertSeverity.coerce(severity)
        resolved_options = self._resolve_options(options or AlertOptions())

        self._timers.cancel_all()
        self._next_id += 1
        alert_id = self._next_id

        self._state = AlertState(
            is_visible=True,
            message=message,
            severity=resolved_severity,
            options=resolved_options,
            is_collapsed=False,
            alert_id=alert_id,
            key=key,
        )
        logger.info(
            "Showing alert #%d: %s - %s (collapsible=%s, auto_close=%s, action=%s)",
            alert_id,
            resolved_severity.value,
            self._state.message_text() or "<rich content>",
            resolved_options.collapsible,
            resolved_options.auto_close_delay,
            bool(resolved_options.action),
        )

        if AlertOptions.has_delay(resolved_options.auto_close_delay):
            self._timers.schedule(
                AUTO_CLOSE_TIMER,
                resolved_options.auto_close_delay,
                lambda: self._auto_close(alert_id),
            )
        if resolved_options.collapsible and AlertOptions.has_delay(resolved_options.collapse_delay):
            self._timers.schedule(
                COLLAPSE_TIMER,
                resolved_options.collapse_delay,
                lambda: self._auto_collapse(alert_id),
            )

        self._notify()

    def hide_alert(self) -> None:
        """Dismiss the current alert and cancel its timers."""
        self._timers.cancel_all()
        if self._state == EMPTY_ALERT_STATE:
            return
        logger.info("Hiding alert #%d", self._state.alert_id)
        self._state = EMPTY_ALERT_STATE
        self._notify()

    def expand(self) -> None:
        """Show the full alert of a collapsed collapsible alert."""
        self._set_collapsed(False)

    def collapse_now(self) -> None:
        """Collapse a collapsible alert immediately."""
        self._set_collapsed(True)

    def close(self) -> None:
        """Cancel outstanding timers and drop listeners."""
        if self._closed:
            return
        cancelled = self._timers.cancel_all()
        self._listeners.clear()
        self._closed = True
        logger.debug("Alert store closed (cancelled_timers=%d)", cancelled)

    def _resolve_options(self, options: AlertOptions) -> AlertOptions:
        if not options.collapsible:
            return replace(options, collapse_delay=None)
        if options.collapse_delay is None and self._default_collapse_delay is not None:
            return replace(options, collapse_delay=self._default_collapse_delay)
        return options

    @staticmethod
    def _is_blank(message: Any) -> bool:
        if message is None:
            return True
        if isinstance(message, str):
            return not message.strip()
        if isinstance(message, Text):
            return not message.plain.strip()
        return False

    def _set_collapsed(self, collapsed: bool) -> None:
        state = self._state
        if self._closed or not (state.is_visible and state.options.collapsible):
            return
        if state.is_collapsed == collapsed:
            return
        self._state = replace(state, is_collapsed=collapsed)
        logger.debug("Alert #%d %s", state.alert_id, "collapsed" if collapsed else "expanded")
        self._notify()

    def _auto_close(self, alert_id: int) -> None:
        if not self._state.is_visible or self._state.alert_id != alert_id:
            return
        logger.info("Auto-closing alert #%d", alert_id)
        self.hide_alert()

    def _auto_collapse(self, alert_id: int) -> None:
        if self._state.alert_id != alert_id:
            return
        self._set_collapsed(True)

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            listener(state)
