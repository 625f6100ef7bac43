"""Tests for the alert provider, access handle and subscriptions."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from alerts import AlertOptions, AlertProvider, AlertProviderError, AlertSubscription, ManualClock, use_alert


def test_use_alert_requires_provider() -> None:
    with pytest.raises(AlertProviderError, match="within an AlertProvider"):
        use_alert(None)


def test_access_functions_keep_identity(provider) -> None:
    first = use_alert(provider)
    second = use_alert(provider)

    first.show_alert("Re-render", "info")
    third = use_alert(provider)

    assert first is second is third
    assert first.show_alert is third.show_alert
    assert first.hide_alert is third.hide_alert


def test_alert_state_is_live_snapshot(access) -> None:
    assert access.alert_state.is_visible is False

    access.show_alert("Visible now", "warning")
    snapshot = access.alert_state
    assert snapshot.is_visible is True
    assert snapshot.message == "Visible now"

    access.hide_alert()
    assert access.alert_state.is_visible is False
    assert snapshot.is_visible is True


def test_provider_reads_default_collapse_delay_from_config(clock) -> None:
    config = SimpleNamespace(default_collapse_delay_ms=1500)
    with AlertProvider(config, clock=clock) as provider:
        access = use_alert(provider)
        access.show_alert("Edit", "edit", AlertOptions(collapsible=True))
        provider.timers.advance(1500)
        assert access.alert_state.is_collapsed is True


def test_provider_close_cancels_pending_timers() -> None:
    clock = ManualClock()
    provider = AlertProvider(clock=clock)
    access = use_alert(provider)
    access.show_alert("Closing soon", "info", AlertOptions(auto_close_delay=1000))

    provider.close()
    provider.close()

    assert provider.closed is True
    assert provider.timers.pending() == []


def test_subscription_attaches_and_detaches(provider, access) -> None:
    received = []

    with AlertSubscription(provider, received.append) as subscription:
        assert subscription.attached is True
        access.show_alert("Inside", "info")

    access.show_alert("Outside", "info")

    assert [state.message for state in received] == ["Inside"]
    assert provider.store.listener_count() == 0


def test_subscription_attach_is_idempotent(provider, access) -> None:
    received = []
    subscription = AlertSubscription(access, received.append)
    subscription.attach()
    subscription.attach()

    access.show_alert("Once", "info")
    subscription.detach()
    subscription.detach()

    assert len(received) == 1
