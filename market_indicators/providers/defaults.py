"""
Default adapter registry configuration.

Registers built-in adapters and builds per-indicator chains from config.yaml settings.
To add a new source, register it here and add it to the priority list.
"""
from __future__ import annotations

from typing import List, Optional

from .. import config
from .chain import FallbackChain
from .csv_history import CboeCsvAdapter, StooqCsvAdapter
from .fmp import FmpQuoteAdapter
from .fred import FredLatestPairAdapter, FredLatestValueAdapter
from .registry import AdapterRegistry
from .twelvedata import TwelveDataQuoteAdapter

# Default priorities (config.yaml can override these)
DEFAULT_PRIORITY = {
    "vix": ["fred", "fmp", "cboe", "stooq"],
    "gold": ["twelvedata", "fmp", "fred_pm", "fred_am"],
    "dxy": ["fred"],
    "equity": ["twelvedata", "fmp"],
}

YIELD_SERIES = {"10Y": "DGS10", "2Y": "DGS2"}


def create_default_registry() -> AdapterRegistry:
    """Create a registry with all built-in adapters."""
    registry = AdapterRegistry()

    registry.register(
        "vix", "fred",
        lambda: FredLatestPairAdapter("VIXCLS", "FRED VIXCLS (daily close)", limit=15),
    )
    registry.register("vix", "fmp", lambda: FmpQuoteAdapter("^VIX", round_price=True))
    registry.register("vix", "cboe", CboeCsvAdapter)
    registry.register("vix", "stooq", lambda: StooqCsvAdapter("^vix"))

    registry.register("gold", "twelvedata", lambda: TwelveDataQuoteAdapter("XAU/USD"))
    registry.register("gold", "fmp", lambda: FmpQuoteAdapter("GC=F"))
    # LBMA fixes in USD/oz
    registry.register(
        "gold", "fred_pm",
        lambda: FredLatestPairAdapter("GOLDPMGBD228NLBM", limit=30, round_price=False),
    )
    registry.register(
        "gold", "fred_am",
        lambda: FredLatestPairAdapter("GOLDAMGBD228NLBM", limit=30, round_price=False),
    )

    registry.register("dxy", "fred", lambda: FredLatestPairAdapter("DTWEXBGS", limit=25))

    registry.register("equity", "twelvedata", lambda symbol: TwelveDataQuoteAdapter(symbol))
    registry.register("equity", "fmp", lambda symbol: FmpQuoteAdapter(symbol))
    return registry


def _priority(kind: str, priority: Optional[List[str]]) -> List[str]:
    return priority or config.priority(kind) or DEFAULT_PRIORITY[kind]


def create_chain(
    kind: str,
    registry: Optional[AdapterRegistry] = None,
    priority: Optional[List[str]] = None,
) -> FallbackChain:
    """Build the fallback chain for a quote indicator ("vix", "gold", "dxy")."""
    reg = registry or create_default_registry()
    adapters = reg.build(kind, _priority(kind, priority))
    return FallbackChain(kind, adapters, freshness_window_s=config.cache_window_s(kind))


def create_vix_chain(registry: Optional[AdapterRegistry] = None) -> FallbackChain:
    return create_chain("vix", registry)


def create_gold_chain(registry: Optional[AdapterRegistry] = None) -> FallbackChain:
    return create_chain("gold", registry)


def create_dxy_chain(registry: Optional[AdapterRegistry] = None) -> FallbackChain:
    return create_chain("dxy", registry)


def create_equity_chain(
    symbol: str,
    registry: Optional[AdapterRegistry] = None,
    priority: Optional[List[str]] = None,
) -> FallbackChain:
    reg = registry or create_default_registry()
    adapters = reg.build("equity", _priority("equity", priority), symbol=symbol)
    return FallbackChain(
        f"equity:{symbol}", adapters, freshness_window_s=config.cache_window_s("equity")
    )


def create_yield_chains() -> dict:
    """One single-source chain per Treasury tenor, keyed "10Y"/"2Y"."""
    window = config.cache_window_s("yield")
    return {
        tenor: FallbackChain(f"yield:{series}", [FredLatestValueAdapter(series)], window)
        for tenor, series in YIELD_SERIES.items()
    }
