"""
Source adapter interface and data contracts.

Every adapter implements SourceAdapter: a parameterless attempt() bound to
one provider endpoint and one indicator, returning a QuoteResult or raising
a SourceError subclass.

Data is returned via frozen dataclasses for immutability and type safety.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

CACHED_SUFFIX = " (cached)"


@dataclass(frozen=True)
class Observation:
    """One (date, value) point from a time-series provider. value is always finite."""

    date: date
    value: float


@dataclass(frozen=True)
class QuoteResult:
    """Normalized success shape shared by every adapter."""

    price: float
    change_percent: Optional[float]
    source: str

    def __post_init__(self) -> None:
        if not isinstance(self.price, (int, float)) or not math.isfinite(self.price):
            raise ValueError(f"QuoteResult.price must be finite, got {self.price!r}")
        if self.change_percent is not None and not math.isfinite(self.change_percent):
            raise ValueError(
                f"QuoteResult.change_percent must be finite or None, got {self.change_percent!r}"
            )

    def as_cached(self) -> "QuoteResult":
        return replace(self, source=self.source + CACHED_SUFFIX)


@dataclass(frozen=True)
class AdapterFailure:
    """Diagnostic for one failed adapter; never raised."""

    source_label: str
    message: str
    # True when the adapter was skipped for a missing credential (ConfigError).
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"src": self.source_label, "ok": False, "err": self.message}


@dataclass(frozen=True)
class ChainResult:
    """Outcome of a successful chain run (live or served from cache)."""

    quote: QuoteResult
    cached: bool = False
    failures: List[AdapterFailure] = field(default_factory=list)

    def tried(self) -> List[Dict[str, Any]]:
        entries = [f.to_dict() for f in self.failures]
        if not self.cached:
            entries.append({"src": self.quote.source, "ok": True})
        return entries


@runtime_checkable
class SourceAdapter(Protocol):
    """Protocol for a single (provider, indicator) quote source."""

    @property
    def source_label(self) -> str: ...

    def attempt(self) -> QuoteResult:
        """Query the provider once (transport retries included) and normalize the response."""
        ...
