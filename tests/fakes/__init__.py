"""Fake adapters for chain, endpoint and API tests (no live network)."""

from .adapters import (
    FakeAdapter,
    FakeAdapterAlwaysFail,
    FakeAdapterFailNThenSucceed,
)

__all__ = [
    "FakeAdapter",
    "FakeAdapterAlwaysFail",
    "FakeAdapterFailNThenSucceed",
]
