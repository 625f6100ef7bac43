"""Shared fixtures for alert subsystem tests."""

from __future__ import annotations

import pytest

from alerts import AlertProvider, ManualClock, use_alert


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def provider(clock: ManualClock):
    alert_provider = AlertProvider(clock=clock)
    yield alert_provider
    alert_provider.close()


@pytest.fixture
def access(provider: AlertProvider):
    return use_alert(provider)
