"""Smoke tests for the HTTP routes."""

from __future__ import annotations

import pytest

fastapi = pytest.importorskip("fastapi")
httpx = pytest.importorskip("httpx")

from starlette.testclient import TestClient  # noqa: E402

from market_indicators import indicators  # noqa: E402
from market_indicators.api import app, get_cache  # noqa: E402
from market_indicators.providers.base import QuoteResult  # noqa: E402
from market_indicators.providers.cache import StalenessCache  # noqa: E402
from market_indicators.timeutils import now_epoch_ms  # noqa: E402


def _offline(*args, **kwargs):
    raise OSError("offline")


@pytest.fixture()
def cache():
    return StalenessCache()


@pytest.fixture()
def client(cache):
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert "version" in data


def test_vix_total_failure_is_500_with_no_store(client, monkeypatch):
    monkeypatch.setattr("market_indicators.providers.transport.requests.get", _offline)
    resp = client.get("/vix")
    assert resp.status_code == 500
    assert resp.headers["cache-control"] == "no-store, must-revalidate"
    body = resp.json()
    assert body["error"] == "All sources failed and no fresh cache"
    assert len(body["_debug"]["tried"]) == 4


def test_vix_served_from_injected_cache(client, cache, monkeypatch):
    monkeypatch.setattr("market_indicators.providers.transport.requests.get", _offline)
    cache.put("vix", QuoteResult(19.9, 1.1, "FMP ^VIX"), now_ms=now_epoch_ms() - 60_000)
    resp = client.get("/vix")
    assert resp.status_code == 200
    assert resp.json()["source"] == "FMP ^VIX (cached)"


def test_gold_never_errors(client):
    resp = client.get("/gold")
    assert resp.status_code == 200
    assert resp.json()["price"] == 0
    assert resp.headers["access-control-allow-origin"] == "*"


def test_yield_spread_route(client, monkeypatch):
    monkeypatch.setattr(indicators, "yield_spread", lambda cache: indicators.IndicatorResponse(
        200, {"spread": -0.3, "inverted": True, "source": "FRED", "timestamp": "t"}))
    resp = client.get("/yield-spread")
    assert resp.status_code == 200
    assert resp.json()["inverted"] is True
    assert resp.headers["cache-control"] == "no-store, must-revalidate"


def test_dxy_and_buffett_without_key(client):
    assert client.get("/dxy").status_code == 500
    resp = client.get("/buffett")
    assert resp.status_code == 500
    assert resp.json()["error"] == "FRED_KEY missing"


def test_all_is_always_200(client, monkeypatch):
    monkeypatch.setattr("market_indicators.providers.transport.requests.get", _offline)
    resp = client.get("/all")
    assert resp.status_code == 200
    body = resp.json()
    assert set(body) >= {"spy", "tsla", "lit", "yieldCurve", "buffett", "gold", "dxy", "vix"}
    assert body["spy"] == {"error": "FMP_KEY missing"}
    assert body["gold"]["price"] == 0
    assert "error" in body["vix"]
