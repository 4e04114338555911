from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, Optional

from .datasource import DrawResult, ResultDataSource, SourceError
from .types import DrawPeriod


class ReconciliationEngine:
    """Merge the primary and fallback sources into one result, field by field.

    The primary source is always consulted. The fallback, which is far
    more expensive, only runs when the primary left a field empty. Source
    failures never propagate: the worst case is a result with both fields
    ``None`` dated now.
    """

    def __init__(
        self,
        primary: ResultDataSource,
        fallback: ResultDataSource,
        logger: Optional[logging.Logger] = None,
        now: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback
        self._logger = logger or logging.getLogger("lottobridge.reconciler")
        self._now = now or (lambda: dt.datetime.now(dt.timezone.utc))

    async def reconcile(self) -> DrawResult:
        primary = await self._attempt(self._primary)

        fallback = None
        if primary is None or not primary.is_complete:
            self._logger.info("Primary result incomplete; consulting %s source.", self._fallback.name)
            fallback = await self._attempt(self._fallback)

        result = DrawResult(
            observation_date=self._pick_date(primary, fallback),
            midday=self._pick(primary, fallback, DrawPeriod.MIDDAY),
            evening=self._pick(primary, fallback, DrawPeriod.EVENING),
        )
        self._logger.debug("Reconciled result: %s", result)
        return result

    async def close(self) -> None:
        await self._primary.close()
        await self._fallback.close()

    async def _attempt(self, source: ResultDataSource) -> Optional[DrawResult]:
        try:
            return await source.fetch_latest()
        except SourceError as exc:
            self._logger.warning("%s source failed: %s", source.name, exc)
        except Exception as exc:
            self._logger.exception("%s source raised unexpectedly: %s", source.name, exc)
        return None

    @staticmethod
    def _pick(
        primary: Optional[DrawResult], fallback: Optional[DrawResult], period: DrawPeriod
    ) -> Optional[str]:
        for candidate in (primary, fallback):
            if candidate is not None and candidate.field(period):
                return candidate.field(period)
        return None

    def _pick_date(
        self, primary: Optional[DrawResult], fallback: Optional[DrawResult]
    ) -> dt.datetime:
        for candidate in (primary, fallback):
            if candidate is not None:
                return candidate.observation_date
        return self._now()
