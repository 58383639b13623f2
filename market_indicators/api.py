"""
Read-only REST API using FastAPI. No auth, pull-only.

Every indicator route answers with no-store caching headers: freshness is
managed by the in-process staleness cache, not by intermediaries.
"""
from __future__ import annotations

from typing import Any, Dict

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from . import __version__, aggregate, indicators
from .providers.cache import StalenessCache, default_cache

app = FastAPI(title="Market Indicators API", version=__version__)


def get_cache() -> StalenessCache:
    """Dependency: the process-wide staleness cache (overridable in tests)."""
    return default_cache()


def _respond(resp: indicators.IndicatorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=resp.status_code, content=resp.body, headers=indicators.NO_STORE_HEADERS
    )


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "version": __version__}


@app.get("/vix")
def vix(cache: StalenessCache = Depends(get_cache)) -> JSONResponse:
    return _respond(indicators.vix(cache))


@app.get("/gold")
def gold(cache: StalenessCache = Depends(get_cache)) -> JSONResponse:
    return _respond(indicators.gold(cache))


@app.get("/dxy")
def dxy(cache: StalenessCache = Depends(get_cache)) -> JSONResponse:
    return _respond(indicators.dxy(cache))


@app.get("/yield-spread")
def yield_spread(cache: StalenessCache = Depends(get_cache)) -> JSONResponse:
    return _respond(indicators.yield_spread(cache))


@app.get("/buffett")
def buffett() -> JSONResponse:
    return _respond(indicators.buffett())


@app.get("/all")
def all_data(cache: StalenessCache = Depends(get_cache)) -> JSONResponse:
    body: Dict[str, Any] = aggregate.fetch_all(cache)
    return JSONResponse(status_code=200, content=body, headers=indicators.NO_STORE_HEADERS)
