"""
Shared exception types for market_indicators.

SourceError and its subclasses are raised by adapters and never escape the
fallback chain; the chain turns them into diagnostics. TotalFailure is the
only error an indicator endpoint ever sees from a chain.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from ..providers.base import AdapterFailure


# Query parameters that carry credentials in provider URLs (FRED api_key, FMP apikey, TwelveData apikey).
_SECRET_PARAM_RE = re.compile(r"(?i)\b((?:api_?key|access_?key|token)=)[^&\s'\")]+")


def redact_secrets(text: str) -> str:
    """Replace credential query values in ``text`` with ``***``."""
    return _SECRET_PARAM_RE.sub(r"\1***", text)


class MarketIndicatorsError(Exception):
    """Base exception for market_indicators; catch this for any package-raised error."""

    pass


class SourceError(MarketIndicatorsError):
    """A single data source could not produce a quote."""

    def __init__(self, message: str, source_label: Optional[str] = None) -> None:
        super().__init__(message)
        self.source_label = source_label


class ConfigError(SourceError):
    """A required credential or setting is missing. Skip the adapter."""


class TransportError(SourceError):
    """HTTP/network failure after the retry budget was spent."""

    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(redact_secrets(f"{detail} ({url})"))
        self.url = url
        self.cause = cause


class DataShapeError(SourceError):
    """Payload did not match the expected structure, or carried a sentinel value."""


class TotalFailure(MarketIndicatorsError):
    """Every adapter in a chain failed and no fresh cache entry was available."""

    def __init__(self, indicator: str, failures: List["AdapterFailure"]) -> None:
        super().__init__(
            f"All sources failed for {indicator}: "
            + "; ".join(f"{f.source_label}: {f.message}" for f in failures)
        )
        self.indicator = indicator
        self.failures = list(failures)


__all__ = [
    "MarketIndicatorsError",
    "SourceError",
    "ConfigError",
    "TransportError",
    "DataShapeError",
    "TotalFailure",
    "redact_secrets",
]
