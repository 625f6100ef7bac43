"""
Producers that keep a standing alert in sync with other application state.

Updates: v0.1.1 - 2026-10-14 - Added unsaved-changes watcher with per-episode dedupe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from alerts.access import AlertAccess
from alerts.models import AlertAction, AlertOptions, AlertSeverity, AlertState

logger = logging.getLogger(__name__)

UNNAMED_PLAN = "Unnamed Plan"
UNSAVED_CHANGES_KEY = "unsaved-changes"
DEFAULT_UNSAVED_COLLAPSE_DELAY_MS = 4000


@dataclass(frozen=True)
class PlanEditState:
    """Upstream state the unsaved-changes watcher derives its alert from."""

    pathname: str = ""
    mode: str = "view"
    original_plan_id: Optional[str] = None
    has_unsaved_changes: bool = False
    plan_name: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "PlanEditState":
        """Build a state from a loosely shaped mapping; missing fields get defaults."""
        if not data:
            return cls()

        plan_name = data.get("plan_name")
        if plan_name is None:
            draft = data.get("draft_plan") or {}
            metadata = draft.get("metadata") if isinstance(draft, Mapping) else None
            if isinstance(metadata, Mapping):
                plan_name = metadata.get("planName") or metadata.get("plan_name")

        plan_id = data.get("original_plan_id")
        return cls(
            pathname=str(data.get("pathname") or ""),
            mode=str(data.get("mode") or "view"),
            original_plan_id=str(plan_id) if plan_id not in (None, "") else None,
            has_unsaved_changes=bool(data.get("has_unsaved_changes", False)),
            plan_name=str(plan_name) if plan_name else None,
        )

    @property
    def display_name(self) -> str:
        name = (self.plan_name or "").strip()
        return name or UNNAMED_PLAN

    @property
    def edit_path(self) -> str:
        if self.mode == "edit" and self.original_plan_id:
            return f"/plan/{self.original_plan_id}/edit"
        return "/plan/edit"

    @property
    def is_edit_page(self) -> bool:
        return self.pathname == self.edit_path


class StandingAlertProducer:
    """Show or hide one keyed alert as upstream state changes.

    Subclasses implement ``should_show`` and ``build_message``. The producer
    shows its alert at most once per episode (a stretch of updates during which
    ``should_show`` stays true for the same ``episode_id``), so repeated updates
    never reset the alert's timers and a dismissal or replacement by the user
    is respected until the episode ends. A new ``episode_id`` replaces the
    alert even while the previous episode's alert is still showing.
    """

    key: str = ""
    severity: AlertSeverity = AlertSeverity.WARNING

    def __init__(self, access: AlertAccess):
        self._access = access
        self._episode: Optional[Any] = None
        self._show_calls = 0

    @property
    def show_calls(self) -> int:
        return self._show_calls

    @property
    def is_showing(self) -> bool:
        return self._owns(self._access.alert_state)

    def should_show(self, state: Any) -> bool:
        raise NotImplementedError

    def build_message(self, state: Any) -> str:
        raise NotImplementedError

    def build_options(self, state: Any) -> AlertOptions:
        return AlertOptions()

    def episode_id(self, state: Any) -> Any:
        return True

    def update(self, state: Any) -> bool:
        """Reconcile the alert with ``state``. Returns True when the store was called."""
        if self.should_show(state):
            episode = self.episode_id(state)
            if self._episode is not None and self._episode == episode:
                return False
            if self._episode is None and self._owns(self._access.alert_state):
                # Adopt an alert already showing under our key.
                self._episode = episode
                return False
            self._episode = episode
            self._show_calls += 1
            logger.debug("Producer %s showing standing alert", self.key)
            self._access.show_alert(
                self.build_message(state),
                self.severity,
                self.build_options(state),
                key=self.key,
            )
            return True

        self._episode = None
        if self._owns(self._access.alert_state):
            logger.debug("Producer %s hiding standing alert", self.key)
            self._access.hide_alert()
            return True
        return False

    def _owns(self, alert_state: AlertState) -> bool:
        return alert_state.matches(self.key, self.severity)


class UnsavedChangesWatcher(StandingAlertProducer):
    """Warn about unsaved plan edits while the user is away from the edit page."""

    key = UNSAVED_CHANGES_KEY
    severity = AlertSeverity.WARNING

    def __init__(self, access: AlertAccess, collapse_delay: Optional[float] = DEFAULT_UNSAVED_COLLAPSE_DELAY_MS):
        super().__init__(access)
        self._collapse_delay = collapse_delay

    def update(self, state: Any) -> bool:
        if not isinstance(state, PlanEditState):
            state = PlanEditState.from_mapping(state)
        return super().update(state)

    def should_show(self, state: PlanEditState) -> bool:
        return state.has_unsaved_changes and not state.is_edit_page

    def build_message(self, state: PlanEditState) -> str:
        return f'You have unsaved changes on "{state.display_name}". '

    def build_options(self, state: PlanEditState) -> AlertOptions:
        action = None
        if state.original_plan_id:
            action = AlertAction(label="Edit Plan", href=f"/plan/{state.original_plan_id}/edit")
        return AlertOptions(
            collapsible=True,
            collapse_delay=self._collapse_delay,
            auto_close_delay=None,
            action=action,
        )

    def episode_id(self, state: PlanEditState) -> Any:
        return state.original_plan_id or "draft"
