"""
Buffett Indicator: total US equity market value as a percentage of GDP.

Numerator is FRED NCBEILQ027S (market value of corporate equities, millions
USD, quarterly) averaged per calendar year. Denominator is FRED GDP
(billions USD, nominal), last valid observation of each year. The latest
year present in both series is reported.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd

from .core.errors import DataShapeError
from .providers.fred import fetch_fred_observations
from .providers.series import clean_fred_observations

logger = logging.getLogger(__name__)

MARKET_CAP_SERIES = "NCBEILQ027S"
GDP_SERIES = "GDP"
OBSERVATION_START = "1980-01-01"


@dataclass(frozen=True)
class BuffettReading:
    year: int
    ratio: float
    market_cap_billion_usd: float
    gdp_billion_usd: float

    def to_body(self) -> Dict[str, Any]:
        return {
            "source": {
                "numerator": f"FRED {MARKET_CAP_SERIES} (avg of quarterly values)",
                "denominator": f"FRED {GDP_SERIES} (annual nominal)",
            },
            "vintage": "latest revised",
            "year": self.year,
            "ratio": self.ratio,
            "market_cap_billion_usd": self.market_cap_billion_usd,
            "gdp_billion_usd": self.gdp_billion_usd,
            "note": "All values in billions of USD. Market cap was converted from millions.",
        }


def _yearly(payload: Any, series_id: str) -> pd.Series:
    obs = clean_fred_observations(payload, series_id)
    return pd.Series(
        [o.value for o in obs],
        index=pd.Index([o.date.year for o in obs], name="year"),
        dtype="float64",
    )


def compute_buffett(market_cap_payload: Any, gdp_payload: Any) -> BuffettReading:
    """Join the two FRED payloads by year and compute the ratio for the latest common year."""
    mcap_by_year = _yearly(market_cap_payload, MARKET_CAP_SERIES).groupby(level="year").mean() / 1e3
    gdp_by_year = _yearly(gdp_payload, GDP_SERIES).groupby(level="year").last()

    common = mcap_by_year.index.intersection(gdp_by_year.index)
    if common.empty:
        raise DataShapeError("No overlapping year found")
    year = int(common.max())
    mcap = float(mcap_by_year.loc[year])
    gdp = float(gdp_by_year.loc[year])
    if gdp == 0:
        raise DataShapeError(f"GDP for {year} is zero")
    return BuffettReading(
        year=year,
        ratio=mcap / gdp * 100,
        market_cap_billion_usd=mcap,
        gdp_billion_usd=gdp,
    )


def fetch_buffett() -> BuffettReading:
    """Fetch both FRED series concurrently and compute the latest reading."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        mcap_future = pool.submit(
            fetch_fred_observations,
            MARKET_CAP_SERIES,
            extra_params={"observation_start": OBSERVATION_START, "frequency": "q"},
        )
        gdp_future = pool.submit(
            fetch_fred_observations,
            GDP_SERIES,
            extra_params={"observation_start": OBSERVATION_START},
        )
        mcap_payload = mcap_future.result()
        gdp_payload = gdp_future.result()
    reading = compute_buffett(mcap_payload, gdp_payload)
    logger.info(
        "Buffett indicator %d: mcap=%.1fB gdp=%.1fB ratio=%.2f%%",
        reading.year, reading.market_cap_billion_usd, reading.gdp_billion_usd, reading.ratio,
    )
    return reading
