"""Core shared types: exception taxonomy."""

from __future__ import annotations

from .errors import (
    ConfigError,
    DataShapeError,
    MarketIndicatorsError,
    SourceError,
    TotalFailure,
    TransportError,
)

__all__ = [
    "ConfigError",
    "DataShapeError",
    "MarketIndicatorsError",
    "SourceError",
    "TotalFailure",
    "TransportError",
]
