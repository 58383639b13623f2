"""
HTTP transport primitives: JSON and raw-text GETs with bounded linear-backoff retries.

Non-2xx statuses, network exceptions and (for JSON) undecodable bodies all
count as failed attempts. Once attempts are exhausted a TransportError is
raised carrying the last cause and the endpoint URL. The query string is left
off the URL because it usually holds an API key.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests

from .. import config
from ..core.errors import TransportError
from .resilience import RetryConfig, retrying_call

logger = logging.getLogger(__name__)


class HttpStatusError(Exception):
    """Response status outside 200-299."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} {url}")
        self.status_code = status_code


def _get(url: str, params: Optional[Mapping[str, Any]]) -> requests.Response:
    resp = requests.get(
        url,
        params=params,
        headers={"User-Agent": config.user_agent()},
        timeout=config.http_timeout_s(),
    )
    if not 200 <= resp.status_code < 300:
        raise HttpStatusError(resp.status_code, url)
    return resp


def _fetch_with_retry(
    url: str,
    read: Callable[[requests.Response], Any],
    max_attempts: int,
    base_delay_ms: float,
    params: Optional[Mapping[str, Any]],
) -> Any:
    retry_config = RetryConfig.from_ms(max_attempts, base_delay_ms)
    try:
        return retrying_call(lambda: read(_get(url, params)), retry_config=retry_config)
    except Exception as exc:
        logger.debug("Giving up on %s after %d attempts", url, max_attempts)
        raise TransportError(url, exc) from exc


def fetch_json_with_retry(
    url: str,
    max_attempts: int = 3,
    base_delay_ms: float = 300,
    *,
    params: Optional[Mapping[str, Any]] = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body."""
    return _fetch_with_retry(url, lambda r: r.json(), max_attempts, base_delay_ms, params)


def fetch_text_with_retry(
    url: str,
    max_attempts: int = 3,
    base_delay_ms: float = 300,
    *,
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """GET ``url`` and return the raw body text."""
    return _fetch_with_retry(url, lambda r: r.text, max_attempts, base_delay_ms, params)
