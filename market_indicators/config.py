"""
Load config from config.yaml with optional env overrides.
Single source of truth for API keys, provider priorities, cache windows and HTTP settings.

API keys are read on every call so that a key added to (or removed from) the
environment takes effect without restarting, and a missing key only degrades
the adapters that need it.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

# Defaults if no YAML or env
_DEFAULTS = {
    "http": {
        "timeout_s": 15.0,
        "user_agent": "Mozilla/5.0 (compatible; MarketIndicators/1.0)",
    },
    "keys": {"fred": "", "fmp": "", "twelve": ""},
    "providers": {},
    "cache": {
        "vix_window_s": 2 * 60 * 60,
        "dxy_window_s": 2 * 60 * 60,
        "gold_window_s": 0,
        "yield_window_s": 0,
        "equity_window_s": 0,
    },
    "aggregate": {"equity_symbols": ["SPY", "TSLA", "LIT"], "max_workers": 4},
}


def _config_yaml_path() -> Path:
    """Config.yaml lives at repo root (parent of package dir) unless overridden."""
    override = os.environ.get("MARKET_INDICATORS_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    import yaml

    config_path = _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    for env_name, key in (("FRED_KEY", "fred"), ("FMP_KEY", "fmp"), ("TWELVE_KEY", "twelve")):
        value = os.environ.get(env_name)
        if value:
            overrides.setdefault("keys", {})[key] = value
    timeout = os.environ.get("MARKET_INDICATORS_HTTP_TIMEOUT_S")
    if timeout:
        overrides.setdefault("http", {})["timeout_s"] = float(timeout)
    return overrides


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def fred_key() -> str:
    return str(get_config()["keys"].get("fred") or "")


def fmp_key() -> str:
    return str(get_config()["keys"].get("fmp") or "")


def twelve_key() -> str:
    return str(get_config()["keys"].get("twelve") or "")


def http_timeout_s() -> float:
    return float(get_config()["http"]["timeout_s"])


def user_agent() -> str:
    return str(get_config()["http"]["user_agent"])


def priority(indicator: str) -> Optional[List[str]]:
    """Provider priority list for an indicator, or None if not configured."""
    value = get_config()["providers"].get(f"{indicator}_priority")
    return list(value) if value else None


def cache_window_s(indicator: str) -> float:
    return float(get_config()["cache"].get(f"{indicator}_window_s", 0) or 0)


def equity_symbols() -> List[str]:
    return [str(s) for s in get_config()["aggregate"]["equity_symbols"]]


def aggregate_max_workers() -> int:
    return int(get_config()["aggregate"]["max_workers"])
