from __future__ import annotations

import asyncio
import datetime as dt
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence, Tuple
from zoneinfo import ZoneInfo

import requests
from bs4 import BeautifulSoup

from ..config import StaticSourceSettings
from ..types import DrawPeriod, DrawResult, Game
from ..validation import compose
from .base import ExtractionError, FetchError, ResultDataSource, SourceError

DEFAULT_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; lotto-bridge/0.1)"}

logger = logging.getLogger("lottobridge.datasource.static")


class ExtractionStrategy(Protocol):
    def extract(self, document: str, count: int) -> str:
        """Return the concatenated digits of the latest draw in ``document``."""
        ...


class LatestNumbersExtractor:
    """Read the draw listed right after the "Latest numbers" heading.

    The digits are the first ``count`` ``li`` elements found under the
    siblings that follow the heading, in document order.
    """

    def __init__(self, marker: str = "Latest numbers", heading_tag: str = "h2") -> None:
        self._marker = marker
        self._heading_tag = heading_tag

    def extract(self, document: str, count: int) -> str:
        soup = BeautifulSoup(document, "html.parser")
        heading = soup.find(
            lambda tag: tag.name == self._heading_tag and self._marker in tag.get_text()
        )
        if heading is None:
            raise ExtractionError(f"Heading containing {self._marker!r} not found")

        entries = []
        for sibling in heading.find_next_siblings():
            entries.extend(sibling.find_all("li"))
            if len(entries) >= count:
                break
        if len(entries) < count:
            raise ExtractionError(f"Expected {count} result entries, found {len(entries)}")
        return "".join(entry.get_text(strip=True) for entry in entries[:count])


@dataclass(frozen=True)
class StaticPage:
    period: DrawPeriod
    game: Game
    url: str


class StaticHtmlDataSource(ResultDataSource):
    """Scrape the four server-rendered result pages."""

    name = "static"

    def __init__(
        self,
        settings: StaticSourceSettings,
        *,
        timezone: str = "America/New_York",
        extractor: Optional[ExtractionStrategy] = None,
        now: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._settings = settings
        self._zone = ZoneInfo(timezone)
        self._extractor = extractor or LatestNumbersExtractor(settings.heading_marker)
        self._now = now or (lambda: dt.datetime.now(self._zone))

    def pages(self) -> Sequence[StaticPage]:
        cfg = self._settings
        return (
            StaticPage(DrawPeriod.MIDDAY, Game.NUMBERS, cfg.midday_numbers_url),
            StaticPage(DrawPeriod.MIDDAY, Game.WIN4, cfg.midday_win4_url),
            StaticPage(DrawPeriod.EVENING, Game.NUMBERS, cfg.evening_numbers_url),
            StaticPage(DrawPeriod.EVENING, Game.WIN4, cfg.evening_win4_url),
        )

    async def fetch_latest(self) -> DrawResult:
        pages = self.pages()
        executor = ThreadPoolExecutor(max_workers=len(pages), thread_name_prefix="static-source")
        try:
            outcomes = await asyncio.gather(
                *(self._read_page(page, executor) for page in pages), return_exceptions=True
            )
        finally:
            # Fetches still blocked past their timeout are abandoned, not joined.
            executor.shutdown(wait=False, cancel_futures=True)

        halves: Dict[Tuple[DrawPeriod, Game], Optional[str]] = {}
        for page, outcome in zip(pages, outcomes):
            if isinstance(outcome, SourceError):
                logger.warning(
                    "%s %s page unavailable (%s): %s",
                    page.period.value,
                    page.game.value,
                    page.url,
                    outcome,
                )
                halves[(page.period, page.game)] = None
            elif isinstance(outcome, Exception):
                logger.error(
                    "%s %s page failed unexpectedly (%s)",
                    page.period.value,
                    page.game.value,
                    page.url,
                    exc_info=outcome,
                )
                halves[(page.period, page.game)] = None
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                halves[(page.period, page.game)] = outcome

        return DrawResult(
            observation_date=self._observation_date(),
            midday=self._composite(halves, DrawPeriod.MIDDAY),
            evening=self._composite(halves, DrawPeriod.EVENING),
        )

    async def _read_page(self, page: StaticPage, executor: ThreadPoolExecutor) -> str:
        timeout = self._settings.timeout_seconds
        loop = asyncio.get_running_loop()
        try:
            document = await asyncio.wait_for(
                loop.run_in_executor(executor, self._get_html, page.url, timeout),
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise FetchError(f"Timed out after {timeout}s") from exc
        return self._extractor.extract(document, page.game.digits)

    @staticmethod
    def _get_html(url: str, timeout_seconds: int) -> str:
        try:
            resp = requests.get(url, timeout=timeout_seconds, headers=DEFAULT_HEADERS)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(str(exc)) from exc
        return resp.text

    @staticmethod
    def _composite(
        halves: Dict[Tuple[DrawPeriod, Game], Optional[str]], period: DrawPeriod
    ) -> Optional[str]:
        return compose(halves.get((period, Game.NUMBERS)), halves.get((period, Game.WIN4)), period)

    def _observation_date(self) -> dt.datetime:
        # Noon on the jurisdiction's local date keeps the day stable across server timezones.
        return self._now().replace(hour=12, minute=0, second=0, microsecond=0)
