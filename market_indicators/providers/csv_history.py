"""
CSV-over-HTTP daily history adapters (no authentication required).

  CBOE:  GET https://cdn.cboe.com/api/global/us_indices/daily_prices/VIX_History.csv
         header DATE,OPEN,HIGH,LOW,CLOSE with MM/DD/YYYY dates
  Stooq: GET https://stooq.com/q/d/l/?s={symbol}&i=d
         header Date,Open,High,Low,Close[,Volume] with YYYY-MM-DD dates;
         body "NO DATA" for unknown symbols or when throttled
"""
from __future__ import annotations

from typing import Optional

from .base import QuoteResult
from .series import latest_pair, parse_history_csv, pct_change, round2
from .transport import fetch_text_with_retry

CBOE_VIX_HISTORY_URL = "https://cdn.cboe.com/api/global/us_indices/daily_prices/VIX_History.csv"
STOOQ_DAILY_URL = "https://stooq.com/q/d/l/"


class _CsvHistoryAdapter:
    url: str = ""
    date_format: Optional[str] = None

    def __init__(self, label: str, *, max_attempts: int = 2, base_delay_ms: float = 400) -> None:
        self._label = label
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms

    @property
    def source_label(self) -> str:
        return self._label

    def _params(self) -> Optional[dict]:
        return None

    def attempt(self) -> QuoteResult:
        text = fetch_text_with_retry(
            self.url, self._max_attempts, self._base_delay_ms, params=self._params()
        )
        observations = parse_history_csv(text, self._label.split()[0], self.date_format)
        latest, previous = latest_pair(observations)
        return QuoteResult(
            price=round2(latest.value),
            change_percent=pct_change(latest.value, previous.value if previous else None),
            source=self._label,
        )


class CboeCsvAdapter(_CsvHistoryAdapter):
    """Official CBOE VIX daily history."""

    url = CBOE_VIX_HISTORY_URL
    date_format = "%m/%d/%Y"

    def __init__(self, label: str = "CBOE CSV", **kwargs) -> None:
        super().__init__(label, **kwargs)


class StooqCsvAdapter(_CsvHistoryAdapter):
    """Stooq community mirror of daily index history."""

    url = STOOQ_DAILY_URL
    date_format = "%Y-%m-%d"

    def __init__(self, symbol: str = "^vix", label: str = "Stooq CSV", **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.symbol = symbol

    def _params(self) -> Optional[dict]:
        return {"s": self.symbol, "i": "d"}
