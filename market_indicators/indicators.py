"""
Indicator endpoints: bind fallback chains to the JSON response contract.

Every endpoint returns an IndicatorResponse (status code + JSON body) and
never raises. The failure policy is per endpoint:
- vix, dxy, buffett: HTTP 500 with {error, _debug, timestamp}
- gold, yield spread: HTTP 200 with a neutral zero payload, so dashboards
  never have to handle an error response
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .buffett import fetch_buffett
from .core.errors import MarketIndicatorsError, TotalFailure
from .providers.base import ChainResult
from .providers.cache import StalenessCache, default_cache
from .providers.chain import FallbackChain
from .providers.defaults import (
    create_dxy_chain,
    create_gold_chain,
    create_vix_chain,
    create_yield_chains,
)
from .providers.series import round2
from .timeutils import now_utc_iso

logger = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, must-revalidate",
    "Access-Control-Allow-Origin": "*",
}


@dataclass(frozen=True)
class IndicatorResponse:
    status_code: int
    body: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _tried(failures: Any) -> List[Dict[str, Any]]:
    return [f.to_dict() for f in failures]


def _quote_body(result: ChainResult, pct_field: str = "changePercent") -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "price": result.quote.price,
        pct_field: result.quote.change_percent,
        "source": result.quote.source,
        "timestamp": now_utc_iso(),
    }
    if result.cached:
        body["_debug"] = {"tried": result.tried()}
    return body


def _error_body(error: str, tried: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error}
    if tried is not None:
        body["_debug"] = {"tried": tried}
    body["timestamp"] = now_utc_iso()
    return body


def _run_quote_endpoint(
    chain: FallbackChain, cache: StalenessCache, error: str, now_ms: Optional[int]
) -> IndicatorResponse:
    try:
        result = chain.run(cache, now_ms)
    except TotalFailure as exc:
        return IndicatorResponse(500, _error_body(error, _tried(exc.failures)))
    return IndicatorResponse(200, _quote_body(result))


def vix(
    cache: Optional[StalenessCache] = None,
    chain: Optional[FallbackChain] = None,
    now_ms: Optional[int] = None,
) -> IndicatorResponse:
    """VIX: FRED VIXCLS, FMP, CBOE CSV, Stooq CSV, then a cache entry up to 2h old."""
    return _run_quote_endpoint(
        chain or create_vix_chain(),
        cache if cache is not None else default_cache(),
        "All sources failed and no fresh cache",
        now_ms,
    )


def dxy(
    cache: Optional[StalenessCache] = None,
    chain: Optional[FallbackChain] = None,
    now_ms: Optional[int] = None,
) -> IndicatorResponse:
    """USD broad index (FRED DTWEXBGS)."""
    return _run_quote_endpoint(
        chain or create_dxy_chain(),
        cache if cache is not None else default_cache(),
        "All DXY sources failed",
        now_ms,
    )


def gold(
    cache: Optional[StalenessCache] = None,
    chain: Optional[FallbackChain] = None,
    now_ms: Optional[int] = None,
) -> IndicatorResponse:
    """Spot gold; degrades to a zero price with HTTP 200 when every source fails."""
    try:
        result = (chain or create_gold_chain()).run(
            cache if cache is not None else default_cache(), now_ms
        )
    except TotalFailure as exc:
        return IndicatorResponse(200, {
            "price": 0,
            "pct": None,
            "source": "unavailable",
            "error": "All gold sources failed",
            "_debug": {"tried": _tried(exc.failures)},
            "timestamp": now_utc_iso(),
        })
    return IndicatorResponse(200, _quote_body(result, pct_field="pct"))


def yield_spread(
    cache: Optional[StalenessCache] = None,
    chains: Optional[Mapping[str, FallbackChain]] = None,
    now_ms: Optional[int] = None,
) -> IndicatorResponse:
    """10Y minus 2Y Treasury yield; degrades to spread 0 with HTTP 200 on any failure."""
    cache = cache if cache is not None else default_cache()
    chains = chains or create_yield_chains()
    try:
        with ThreadPoolExecutor(max_workers=len(chains)) as pool:
            futures = {tenor: pool.submit(chain.run, cache, now_ms) for tenor, chain in chains.items()}
            values = {tenor: fut.result().quote.price for tenor, fut in futures.items()}
    except TotalFailure as exc:
        logger.error("yield spread failed, falling back to 0: %s", exc)
        return IndicatorResponse(200, {
            "spread": 0,
            "inverted": False,
            "source": "FRED",
            "timestamp": now_utc_iso(),
        })

    y10, y2 = values["10Y"], values["2Y"]
    spread = y10 - y2
    return IndicatorResponse(200, {
        "spread": round2(spread),
        "inverted": spread < 0,
        "source": "FRED",
        "timestamp": now_utc_iso(),
        "components": {"10Y": y10, "2Y": y2},
    })


def buffett() -> IndicatorResponse:
    """Market cap to GDP ratio; HTTP 500 with the error message on failure."""
    try:
        reading = fetch_buffett()
    except MarketIndicatorsError as exc:
        logger.error("buffett indicator failed: %s", exc)
        return IndicatorResponse(500, _error_body(str(exc)))
    return IndicatorResponse(200, reading.to_body())
