"""Cache-aware execution of operation producers."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from typelens.config.runtime import RuntimeOptionsStore
from typelens.mcp.response_cache import ResponseCache

log = structlog.get_logger(__name__)


class ToolExecutor:
    """Runs a producer behind the response cache.

    A fresh cached payload is returned without calling the producer.
    Otherwise the producer runs and its result is stored for the current
    TTL (never below one second). ``no_cache`` skips both the lookup and
    the store, leaving any existing entry in place for other callers.

    Producers signal failure by raising; failures are never cached.
    """

    def __init__(self, cache: ResponseCache, options: RuntimeOptionsStore) -> None:
        self._cache = cache
        self._options = options

    def execute(self, key: str, producer: Callable[[], str], *, no_cache: bool = False) -> str:
        if not no_cache:
            cached = self._cache.try_get(key)
            if cached is not None:
                log.debug("cache_hit", key=key[:80])
                return cached

        payload = producer()

        if not no_cache:
            self._cache.set(key, payload, self._options.current.effective_ttl)
        return payload
