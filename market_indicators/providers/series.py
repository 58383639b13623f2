"""
Normalization helpers shared by adapters: numeric parsing with sentinel
rejection, observation cleaning/ordering, and percent change.
"""
from __future__ import annotations

import io
import math
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

from ..core.errors import DataShapeError
from .base import Observation

# FRED encodes a missing observation as "."
MISSING_SENTINELS = frozenset({".", "", "NaN", "nan", "null", "None", "N/A"})


def to_finite_float(x: Any) -> Optional[float]:
    """Return ``x`` as a finite float, or None for sentinels and anything non-numeric."""
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, str):
        x = x.strip()
        if x in MISSING_SENTINELS:
            return None
    try:
        value = float(x)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def require_number(x: Any, what: str) -> float:
    """Like to_finite_float, but a missing/sentinel value is a DataShapeError."""
    value = to_finite_float(x)
    if value is None:
        raise DataShapeError(f"{what}: non-numeric value {x!r}")
    return value


def first_number(*candidates: Any) -> Optional[float]:
    for c in candidates:
        value = to_finite_float(c)
        if value is not None:
            return value
    return None


def round2(x: float) -> float:
    return round(x, 2)


def pct_change(latest: float, previous: Optional[float]) -> Optional[float]:
    """(latest - previous) / previous * 100 rounded to 2 places; None if previous is missing or zero."""
    if previous is None or previous == 0:
        return None
    change = (latest - previous) / previous * 100
    return round2(change) if math.isfinite(change) else None


def _parse_date(raw: Any) -> Optional[date]:
    if not isinstance(raw, str):
        return None
    try:
        return datetime.strptime(raw.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def clean_fred_observations(payload: Any, series_id: str) -> List[Observation]:
    """
    Extract valid observations from a FRED ``series/observations`` payload,
    sorted ascending by date regardless of the requested sort order.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("observations"), list):
        raise DataShapeError(f"FRED {series_id}: no observations array")
    clean: List[Observation] = []
    for o in payload["observations"]:
        if not isinstance(o, dict):
            continue
        value = to_finite_float(o.get("value"))
        obs_date = _parse_date(o.get("date"))
        if value is None or obs_date is None:
            continue
        clean.append(Observation(date=obs_date, value=value))
    if not clean:
        raise DataShapeError(f"FRED {series_id}: no numeric observations")
    return sorted(clean, key=lambda ob: ob.date)


def latest_pair(observations: Sequence[Observation]) -> tuple[Observation, Optional[Observation]]:
    """Latest and previous observation of an ascending, already-cleaned series."""
    if not observations:
        raise DataShapeError("no observations")
    previous = observations[-2] if len(observations) >= 2 else None
    return observations[-1], previous


def parse_history_csv(text: str, label: str, date_format: Optional[str] = None) -> List[Observation]:
    """
    Parse a daily OHLC history CSV (header row with DATE and CLOSE columns,
    any case) into ascending observations of the close.
    """
    body = (text or "").strip()
    if not body or body.upper() == "NO DATA":
        raise DataShapeError(f"{label}: NO DATA")
    try:
        df = pd.read_csv(io.StringIO(body), dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataShapeError(f"{label}: unreadable CSV ({exc})") from exc

    columns = {str(c).strip().lower(): c for c in df.columns}
    if "date" not in columns or "close" not in columns:
        raise DataShapeError(f"{label}: missing DATE/CLOSE columns (got {list(df.columns)})")

    dates = pd.to_datetime(df[columns["date"]], format=date_format, errors="coerce")
    closes = pd.to_numeric(df[columns["close"]].map(to_finite_float), errors="coerce")
    frame = pd.DataFrame({"date": dates, "close": closes}).dropna()
    if frame.empty:
        raise DataShapeError(f"{label}: no data rows")
    frame = frame.sort_values("date", kind="stable")
    return [
        Observation(date=ts.date(), value=float(v))
        for ts, v in zip(frame["date"], frame["close"])
    ]


def observations_on_or_before(observations: Iterable[Observation], cutoff: date) -> List[Observation]:
    return [o for o in observations if o.date <= cutoff]
