"""
Fallback chains: ordered, sequential provider selection with a staleness-cache last resort.

A chain tries its adapters strictly in priority order and stops at the first
success. Adapters are never raced: later ones are often rate-limited or paid,
so they are only hit when everything ahead of them failed. Each failure is
recorded as a diagnostic. When all adapters fail, a fresh cache entry (if
any) is served with its source tagged " (cached)"; otherwise TotalFailure.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..core.errors import ConfigError, SourceError, TotalFailure, redact_secrets
from ..timeutils import now_epoch_ms
from .base import AdapterFailure, ChainResult, SourceAdapter
from .cache import StalenessCache

logger = logging.getLogger(__name__)


def _describe(exc: Exception) -> str:
    if isinstance(exc, SourceError):
        return str(exc)
    return redact_secrets(f"{type(exc).__name__}: {exc}")


class FallbackChain:
    """
    Immutable ordered list of adapters bound to one indicator key.

    ``freshness_window_s`` of None or 0 disables serving from cache; successes
    are still written so the window can be enabled later without a cold start.
    """

    def __init__(
        self,
        indicator: str,
        adapters: Sequence[SourceAdapter],
        freshness_window_s: Optional[float] = None,
    ) -> None:
        self._indicator = indicator
        self._adapters = tuple(adapters)
        self._window_s = freshness_window_s or 0

    @property
    def indicator(self) -> str:
        return self._indicator

    @property
    def adapters(self) -> tuple:
        return self._adapters

    @property
    def freshness_window_s(self) -> float:
        return self._window_s

    def run(
        self,
        cache: Optional[StalenessCache] = None,
        now_ms: Optional[int] = None,
    ) -> ChainResult:
        """Return the first live quote, else a fresh cached one. Raises TotalFailure."""
        failures: List[AdapterFailure] = []
        for adapter in self._adapters:
            label = adapter.source_label
            try:
                quote = adapter.attempt()
            except Exception as exc:
                msg = _describe(exc)
                failures.append(
                    AdapterFailure(label, msg, skipped=isinstance(exc, ConfigError))
                )
                if isinstance(exc, SourceError):
                    logger.info("%s: %s failed: %s", self._indicator, label, msg)
                else:
                    logger.warning("%s: %s raised unexpectedly: %s", self._indicator, label, msg)
                continue

            if cache is not None:
                cache.put(self._indicator, quote, now_epoch_ms() if now_ms is None else now_ms)
            return ChainResult(quote=quote, failures=failures)

        if cache is not None and self._window_s > 0:
            entry = cache.get_fresh(self._indicator, self._window_s, now_ms)
            if entry is not None:
                logger.warning(
                    "All %d sources failed for %s, serving cached %s",
                    len(self._adapters), self._indicator, entry.result.source,
                )
                return ChainResult(quote=entry.result.as_cached(), cached=True, failures=failures)

        logger.warning("All %d sources failed for %s", len(self._adapters), self._indicator)
        raise TotalFailure(self._indicator, failures)


def run_chain(
    adapters: Sequence[SourceAdapter],
    cache: Optional[StalenessCache],
    indicator: str,
    freshness_window_s: Optional[float] = None,
    now_ms: Optional[int] = None,
) -> ChainResult:
    """Functional form of FallbackChain(...).run(...)."""
    return FallbackChain(indicator, adapters, freshness_window_s).run(cache, now_ms)
