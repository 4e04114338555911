from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Awaitable, Callable, Optional

from .cache import ResultCache
from .reconciler import ReconciliationEngine
from .types import DrawResult


class QueryService:
    """Serve the reconciled result, regenerating it only when the cache is stale.

    Concurrent callers that miss the cache together share a single
    reconciliation: the first takes the lock and refreshes, the others
    find the fresh entry once they acquire it.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        cache: ResultCache,
        runner: Callable[[Awaitable[DrawResult]], Any] = asyncio.run,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._runner = runner
        self._refresh_lock = threading.Lock()
        self._logger = logger or logging.getLogger("lottobridge.query")

    def latest(self) -> DrawResult:
        cached = self._cache.get()
        if cached is not None:
            return cached

        with self._refresh_lock:
            cached = self._cache.get()
            if cached is not None:
                self._logger.debug("Served by concurrent refresh.")
                return cached

            self._logger.info("Cache miss; reconciling sources.")
            result = self._runner(self._engine.reconcile())
            self._cache.put(result)
            return result
