"""
Global alert subsystem: one alert slot with timed auto-close and collapse.

Updates: v0.1.0 - 2026-10-12 - Replaced notification dispatcher with the single-slot alert store.
"""

from alerts.access import AlertAccess, AlertProvider, AlertSubscription, use_alert
from alerts.errors import AlertError, AlertProviderError, ScenarioError
from alerts.models import EMPTY_ALERT_STATE, AlertAction, AlertOptions, AlertSeverity, AlertState
from alerts.producers import PlanEditState, StandingAlertProducer, UnsavedChangesWatcher
from alerts.store import AlertStore
from alerts.timers import ManualClock, TimerController, TimerHandle
from alerts.view import AlertView

__all__ = [
    "AlertAccess",
    "AlertAction",
    "AlertError",
    "AlertOptions",
    "AlertProvider",
    "AlertProviderError",
    "AlertSeverity",
    "AlertState",
    "AlertStore",
    "AlertSubscription",
    "AlertView",
    "EMPTY_ALERT_STATE",
    "ManualClock",
    "PlanEditState",
    "ScenarioError",
    "StandingAlertProducer",
    "TimerController",
    "TimerHandle",
    "UnsavedChangesWatcher",
    "use_alert",
]
