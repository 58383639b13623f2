"""
Adapter registry: central catalog of available sources per indicator.

Each indicator kind ("vix", "gold", ...) maps provider names to adapter
factories. A priority list (config.yaml or the built-in default) decides which
providers make up the chain and in what order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .base import SourceAdapter

logger = logging.getLogger(__name__)

AdapterFactory = Callable[..., SourceAdapter]


class AdapterRegistry:
    """
    Maps (indicator kind, provider name) to an adapter factory.

    Usage:
        registry = AdapterRegistry()
        registry.register("vix", "fred", lambda: FredLatestPairAdapter("VIXCLS"))
        registry.register("vix", "cboe", CboeCsvAdapter)

        adapters = registry.build("vix", ["fred", "cboe"])
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Dict[str, AdapterFactory]] = {}

    def register(self, kind: str, name: str, factory: AdapterFactory) -> None:
        """Register an adapter factory by indicator kind and provider name."""
        self._factories.setdefault(kind, {})[name] = factory
        logger.debug("Registered %s adapter: %s", kind, name)

    def names(self, kind: str) -> List[str]:
        return list(self._factories.get(kind, {}))

    @property
    def kinds(self) -> List[str]:
        return list(self._factories)

    def create(self, kind: str, name: str, **kwargs: Any) -> SourceAdapter:
        factory = self._factories.get(kind, {}).get(name)
        if factory is None:
            raise KeyError(
                f"Unknown {kind} provider '{name}'. Available: {self.names(kind)}"
            )
        return factory(**kwargs)

    def build(
        self, kind: str, priority: Optional[List[str]] = None, **kwargs: Any
    ) -> List[SourceAdapter]:
        """Build an ordered list of fresh adapters from a priority list; unknown names are skipped."""
        available = self._factories.get(kind, {})
        names = priority or list(available)
        unknown = [n for n in names if n not in available]
        if unknown:
            logger.warning("Ignoring unknown %s providers: %s", kind, unknown)
        return [self.create(kind, n, **kwargs) for n in names if n in available]
