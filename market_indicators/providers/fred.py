"""
FRED (St. Louis Fed) time-series adapters.

Uses the observations endpoint (API key required):
  GET https://api.stlouisfed.org/fred/series/observations?series_id={id}&api_key={key}&file_type=json
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .. import config
from ..core.errors import ConfigError, DataShapeError
from ..timeutils import today_utc
from .base import QuoteResult
from .series import clean_fred_observations, latest_pair, observations_on_or_before, pct_change, round2
from .transport import fetch_json_with_retry

FRED_OBSERVATIONS_URL = "https://api.stlouisfed.org/fred/series/observations"


def fetch_fred_observations(
    series_id: str,
    *,
    sort_order: Optional[str] = None,
    limit: Optional[int] = None,
    extra_params: Optional[Dict[str, Any]] = None,
    max_attempts: int = 3,
    base_delay_ms: float = 300,
) -> Any:
    """Raw FRED observations payload. Raises ConfigError without FRED_KEY."""
    key = config.fred_key()
    if not key:
        raise ConfigError("FRED_KEY missing")
    params: Dict[str, Any] = {"series_id": series_id, "api_key": key, "file_type": "json"}
    if sort_order:
        params["sort_order"] = sort_order
    if limit:
        params["limit"] = limit
    params.update(extra_params or {})
    return fetch_json_with_retry(
        FRED_OBSERVATIONS_URL, max_attempts, base_delay_ms, params=params
    )


class FredLatestPairAdapter:
    """Latest value of a FRED series plus percent change against the previous valid value."""

    def __init__(
        self,
        series_id: str,
        label: Optional[str] = None,
        *,
        sort_order: Optional[str] = "desc",
        limit: Optional[int] = 15,
        round_price: bool = True,
    ) -> None:
        self.series_id = series_id
        self._label = label or f"FRED {series_id}"
        self._sort_order = sort_order
        self._limit = limit
        self._round_price = round_price

    @property
    def source_label(self) -> str:
        return self._label

    def attempt(self) -> QuoteResult:
        payload = fetch_fred_observations(
            self.series_id, sort_order=self._sort_order, limit=self._limit
        )
        latest, previous = latest_pair(clean_fred_observations(payload, self.series_id))
        price = round2(latest.value) if self._round_price else latest.value
        return QuoteResult(
            price=price,
            change_percent=pct_change(latest.value, previous.value if previous else None),
            source=self._label,
        )


class FredLatestValueAdapter:
    """Most recent valid observation dated no later than today; no percent change."""

    def __init__(self, series_id: str, label: Optional[str] = None, limit: int = 10) -> None:
        self.series_id = series_id
        self._label = label or f"FRED {series_id}"
        self._limit = limit

    @property
    def source_label(self) -> str:
        return self._label

    def attempt(self) -> QuoteResult:
        payload = fetch_fred_observations(self.series_id, sort_order="desc", limit=self._limit)
        usable = observations_on_or_before(
            clean_fred_observations(payload, self.series_id), today_utc()
        )
        if not usable:
            raise DataShapeError(f"No valid recent observation for {self.series_id}")
        return QuoteResult(price=usable[-1].value, change_percent=None, source=self._label)
