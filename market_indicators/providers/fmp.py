"""
Financial Modeling Prep quote adapter.

Uses the v3 quote endpoint (API key required, rate-limited on free plans):
  GET https://financialmodelingprep.com/api/v3/quote/{symbol}?apikey={key}
"""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote as urlquote

from .. import config
from ..core.errors import ConfigError, DataShapeError
from .base import QuoteResult
from .series import first_number, require_number, round2
from .transport import fetch_json_with_retry

FMP_BASE_URL = "https://financialmodelingprep.com"

# Fallback order for the price; a later field is used only when earlier ones are absent or null.
PRICE_FIELDS = ("price", "previousClose", "dayHigh", "dayLow")


def _first_present(q: Dict[str, Any], fields: tuple, symbol: str) -> Any:
    for name in fields:
        if q.get(name) is not None:
            return q[name]
    raise DataShapeError(f"FMP: no usable price for {symbol}")


class FmpQuoteAdapter:
    """Intraday quote for one FMP symbol (e.g. ^VIX, GC=F, SPY)."""

    def __init__(
        self,
        symbol: str,
        label: Optional[str] = None,
        *,
        round_price: bool = False,
        max_attempts: int = 2,
        base_delay_ms: float = 400,
    ) -> None:
        self.symbol = symbol
        self._label = label or f"FMP {symbol}"
        self._round_price = round_price
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms

    @property
    def source_label(self) -> str:
        return self._label

    def attempt(self) -> QuoteResult:
        key = config.fmp_key()
        if not key:
            raise ConfigError("FMP_KEY missing")
        url = f"{FMP_BASE_URL}/api/v3/quote/{urlquote(self.symbol, safe='')}"
        data = fetch_json_with_retry(
            url, self._max_attempts, self._base_delay_ms, params={"apikey": key}
        )
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            raise DataShapeError("FMP: empty response")
        q = data[0]

        price = require_number(_first_present(q, PRICE_FIELDS, self.symbol), f"FMP {self.symbol} price")
        pct = first_number(q.get("changesPercentage"), q.get("changePercent"))

        return QuoteResult(
            price=round2(price) if self._round_price else price,
            change_percent=round2(pct) if pct is not None else None,
            source=self._label,
        )
