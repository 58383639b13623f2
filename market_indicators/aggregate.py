"""
Aggregate snapshot for dashboards: every indicator plus a handful of equity quotes.

Equity chains are independent of one another, so they are fanned out on a
thread pool; each chain is still sequential internally. A failed component
is replaced by {"error": message} and never fails the whole snapshot.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from . import config, indicators
from .core.errors import TotalFailure
from .providers.cache import StalenessCache, default_cache
from .providers.chain import FallbackChain
from .providers.defaults import create_equity_chain

logger = logging.getLogger(__name__)


def _reported_failure(exc: TotalFailure) -> str:
    """
    The last failure that came from an attempted request. Adapters skipped
    for a missing key only win when nothing was attempted at all.
    """
    attempted = [f for f in exc.failures if not f.skipped]
    candidates = attempted or exc.failures
    return candidates[-1].message if candidates else str(exc)


def _equity_quote(chain: FallbackChain, cache: StalenessCache) -> Dict[str, Any]:
    try:
        result = chain.run(cache)
    except TotalFailure as exc:
        return {"error": _reported_failure(exc)}
    return {"price": result.quote.price, "pct": result.quote.change_percent}


def fetch_equities(
    symbols: Optional[List[str]] = None,
    cache: Optional[StalenessCache] = None,
    chain_factory: Callable[[str], FallbackChain] = create_equity_chain,
    max_workers: Optional[int] = None,
) -> Dict[str, Dict[str, Any]]:
    """Quote each symbol through its own TwelveData -> FMP chain, concurrently."""
    symbols = symbols if symbols is not None else config.equity_symbols()
    if not symbols:
        return {}
    cache = cache if cache is not None else default_cache()
    workers = max_workers or config.aggregate_max_workers()
    with ThreadPoolExecutor(max_workers=min(workers, len(symbols))) as pool:
        futures = {s: pool.submit(_equity_quote, chain_factory(s), cache) for s in symbols}
        return {s.lower(): fut.result() for s, fut in futures.items()}


def _component(name: str, fn: Callable[[], indicators.IndicatorResponse]) -> Dict[str, Any]:
    try:
        resp = fn()
    except Exception as exc:
        logger.warning("aggregate component %s raised: %s: %s", name, type(exc).__name__, exc)
        return {"error": f"{type(exc).__name__}: {exc}"}
    if not resp.ok:
        return {"error": str(resp.body.get("error", f"HTTP {resp.status_code}"))}
    return resp.body


def fetch_all(cache: Optional[StalenessCache] = None) -> Dict[str, Any]:
    """Merged snapshot keyed the way the dashboard widgets expect."""
    cache = cache if cache is not None else default_cache()
    results: Dict[str, Any] = {}
    results.update(fetch_equities(cache=cache))
    results["yieldCurve"] = _component("yieldCurve", lambda: indicators.yield_spread(cache))
    results["buffett"] = _component("buffett", indicators.buffett)
    results["gold"] = _component("gold", lambda: indicators.gold(cache))
    results["dxy"] = _component("dxy", lambda: indicators.dxy(cache))
    results["vix"] = _component("vix", lambda: indicators.vix(cache))
    return results
