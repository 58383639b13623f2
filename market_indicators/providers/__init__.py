"""
Source adapters and the multi-source fallback engine.

Each indicator is served by an ordered chain of adapters with linear-backoff
transport retries, sequential first-success-wins fallback, and a short-lived
staleness cache as last resort.
"""

from __future__ import annotations

from .base import AdapterFailure, ChainResult, Observation, QuoteResult, SourceAdapter
from .cache import CacheEntry, StalenessCache, default_cache
from .chain import FallbackChain, run_chain
from .registry import AdapterRegistry
from .resilience import RetryConfig, exponential_backoff, linear_backoff, retrying_call
from .transport import fetch_json_with_retry, fetch_text_with_retry

__all__ = [
    "AdapterFailure",
    "AdapterRegistry",
    "CacheEntry",
    "ChainResult",
    "FallbackChain",
    "Observation",
    "QuoteResult",
    "RetryConfig",
    "SourceAdapter",
    "StalenessCache",
    "default_cache",
    "exponential_backoff",
    "fetch_json_with_retry",
    "fetch_text_with_retry",
    "linear_backoff",
    "retrying_call",
    "run_chain",
]
