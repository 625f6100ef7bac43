"""
Provider and access handle through which the application reaches the alert store.

The provider is built once at application start and handed to every consumer.
``use_alert`` returns the same ``AlertAccess`` object each time, so the
``show_alert`` and ``hide_alert`` callables keep their identity and consumers
keyed on them never re-fire spuriously.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Union

from alerts.errors import AlertProviderError
from alerts.models import AlertState
from alerts.store import DEFAULT_COLLAPSE_DELAY_MS, AlertListener, AlertStore
from alerts.timers import Clock, TimerController

logger = logging.getLogger(__name__)


class AlertAccess:
    """Read the current alert and invoke the two alert operations."""

    __slots__ = ("_store", "show_alert", "hide_alert")

    def __init__(self, store: AlertStore):
        self._store = store
        self.show_alert: Callable[..., None] = store.show_alert
        self.hide_alert: Callable[[], None] = store.hide_alert

    @property
    def alert_state(self) -> AlertState:
        return self._store.state

    @property
    def store(self) -> AlertStore:
        return self._store

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        return self._store.subscribe(listener)


class AlertProvider:
    """Composition root owning the timer controller, the store and its access handle."""

    def __init__(
        self,
        config: Any = None,
        *,
        clock: Optional[Clock] = None,
        store: Optional[AlertStore] = None,
    ):
        if store is None:
            default_delay = DEFAULT_COLLAPSE_DELAY_MS
            if config is not None:
                default_delay = getattr(config, "default_collapse_delay_ms", default_delay)
            store = AlertStore(TimerController(clock), default_collapse_delay=default_delay)
        self._store = store
        self._access = AlertAccess(store)
        self._closed = False

    @property
    def store(self) -> AlertStore:
        return self._store

    @property
    def timers(self) -> TimerController:
        return self._store.timers

    @property
    def access(self) -> AlertAccess:
        return self._access

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Cancel outstanding timers; safe to call more than once."""
        if self._closed:
            return
        self._store.close()
        self._closed = True
        logger.debug("Alert provider closed")

    def __enter__(self) -> "AlertProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def use_alert(provider: Optional[AlertProvider]) -> AlertAccess:
    """Return the provider's access handle."""
    if provider is None:
        raise AlertProviderError("use_alert must be used within an AlertProvider")
    return provider.access


class AlertSubscription:
    """Attach a listener for the duration of a block (or between attach/detach)."""

    def __init__(self, source: Union[AlertProvider, AlertAccess, AlertStore], listener: AlertListener):
        if isinstance(source, (AlertProvider, AlertAccess)):
            source = source.store
        self._store: AlertStore = source
        self._listener = listener
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None

    def attach(self) -> "AlertSubscription":
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._listener)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> "AlertSubscription":
        return self.attach()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()
