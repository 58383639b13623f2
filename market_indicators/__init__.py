"""
market_indicators: market indicator endpoints (VIX, gold, USD index, yield
spread, Buffett indicator) served from ordered multi-provider fallback chains.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
