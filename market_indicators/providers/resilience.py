"""
Resilience primitives: a retrying-call wrapper with pluggable backoff.

Retries exist only for transient faults on the *same* provider. Falling back
to another provider is the chain's job, not this module's.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

BackoffFn = Callable[[float, int], float]


def linear_backoff(base_delay_s: float, attempt: int) -> float:
    """Delay before retrying after 1-based ``attempt``: base, 2*base, 3*base..."""
    return base_delay_s * attempt


def exponential_backoff(base_delay_s: float, attempt: int, factor: float = 1.5) -> float:
    return base_delay_s * (factor ** (attempt - 1))


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for bounded retries."""
    max_attempts: int = 3
    base_delay_s: float = 0.3
    backoff: BackoffFn = linear_backoff
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay_s < 0:
            raise ValueError(f"base_delay_s must be >= 0, got {self.base_delay_s}")

    @classmethod
    def from_ms(cls, max_attempts: int, base_delay_ms: float, **kwargs: Any) -> "RetryConfig":
        return cls(max_attempts=max_attempts, base_delay_s=base_delay_ms / 1000.0, **kwargs)

    def delay_after(self, attempt: int) -> float:
        return self.backoff(self.base_delay_s, attempt)


def retrying_call(
    func: Callable[..., T],
    *args: Any,
    retry_config: Optional[RetryConfig] = None,
    sleep: Optional[Callable[[float], None]] = None,
    **kwargs: Any,
) -> T:
    """
    Call ``func`` up to ``retry_config.max_attempts`` times.

    Only exceptions in ``retry_config.retry_on`` are retried; anything else
    propagates immediately. Raises the last exception once attempts are spent.
    No sleep follows the final attempt.
    """
    cfg = retry_config or RetryConfig()

    last_err: Optional[BaseException] = None
    for attempt in range(1, cfg.max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except cfg.retry_on as exc:
            last_err = exc
            logger.debug(
                "Attempt %d/%d failed: %s: %s",
                attempt, cfg.max_attempts, type(exc).__name__, exc,
            )
            if attempt < cfg.max_attempts:
                (sleep or time.sleep)(cfg.delay_after(attempt))

    raise last_err  # type: ignore[misc]
