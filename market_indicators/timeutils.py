"""
Single source for "now" time. Supports deterministic mode for tests via
MARKET_INDICATORS_DETERMINISTIC_TIME (ISO format, e.g. 2026-01-01T00:00:00Z).
"""

from __future__ import annotations

import os
import time
from datetime import date, datetime, timezone
from typing import Optional

_DETERMINISTIC_ENV = "MARKET_INDICATORS_DETERMINISTIC_TIME"


def _fixed_now() -> Optional[datetime]:
    fixed = os.environ.get(_DETERMINISTIC_ENV, "").strip()
    if not fixed:
        return None
    dt = datetime.fromisoformat(fixed.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def now_utc() -> datetime:
    return _fixed_now() or datetime.now(timezone.utc)


def now_utc_iso() -> str:
    """
    Return current UTC time in ISO-8601 with milliseconds and a Z suffix,
    the shape JavaScript clients get from Date.toISOString().
    """
    return now_utc().astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def now_epoch_ms() -> int:
    fixed = _fixed_now()
    if fixed is not None:
        return int(fixed.timestamp() * 1000)
    return int(time.time() * 1000)


def today_utc() -> date:
    return now_utc().date()
