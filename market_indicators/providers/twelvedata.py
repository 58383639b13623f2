"""
Twelve Data quote adapter.

  GET https://api.twelvedata.com/quote?symbol={symbol}&apikey={key}

Errors come back as HTTP 200 with {"status": "error", "message": ...}.
"""
from __future__ import annotations

from typing import Optional

from .. import config
from ..core.errors import ConfigError, DataShapeError
from .base import QuoteResult
from .series import require_number, to_finite_float
from .transport import fetch_json_with_retry

TWELVE_QUOTE_URL = "https://api.twelvedata.com/quote"


class TwelveDataQuoteAdapter:
    """Latest close and percent change for one Twelve Data symbol (e.g. XAU/USD, SPY)."""

    def __init__(
        self,
        symbol: str,
        label: Optional[str] = None,
        *,
        max_attempts: int = 2,
        base_delay_ms: float = 400,
    ) -> None:
        self.symbol = symbol
        self._label = label or f"TwelveData {symbol}"
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms

    @property
    def source_label(self) -> str:
        return self._label

    def attempt(self) -> QuoteResult:
        key = config.twelve_key()
        if not key:
            raise ConfigError("TWELVE_KEY missing")
        data = fetch_json_with_retry(
            TWELVE_QUOTE_URL,
            self._max_attempts,
            self._base_delay_ms,
            params={"symbol": self.symbol, "apikey": key},
        )
        if not isinstance(data, dict):
            raise DataShapeError(f"TwelveData: unexpected response type {type(data).__name__}")
        if data.get("status") == "error":
            raise DataShapeError(str(data.get("message") or "TwelveData error"))

        price = require_number(data.get("close"), "TwelveData close")
        return QuoteResult(
            price=price,
            change_percent=to_finite_float(data.get("percent_change")),
            source=self._label,
        )
