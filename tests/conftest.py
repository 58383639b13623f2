"""Shared fixtures: isolated config, no API keys, no real backoff sleeps."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("MARKET_INDICATORS_CONFIG", str(tmp_path / "missing-config.yaml"))
    for name in ("FRED_KEY", "FMP_KEY", "TWELVE_KEY", "MARKET_INDICATORS_DETERMINISTIC_TIME"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff sleeps instead of sleeping."""
    recorded = []
    monkeypatch.setattr("market_indicators.providers.resilience.time.sleep", recorded.append)
    return recorded


@pytest.fixture(autouse=True)
def _no_sleep(monkeypatch):
    monkeypatch.setattr("market_indicators.providers.resilience.time.sleep", lambda _s: None)
