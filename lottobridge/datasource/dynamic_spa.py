from __future__ import annotations

import datetime as dt
import logging
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import partial
from typing import (
    Any,
    AsyncContextManager,
    AsyncIterator,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
)

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..config import DynamicSourceSettings
from ..types import DrawPeriod, DrawResult, Game
from ..validation import compose
from .base import ExtractionError, FetchError, ResultDataSource, SourceError

JSON_CONTENT_TYPE = re.compile(r"application/json", re.IGNORECASE)

logger = logging.getLogger("lottobridge.datasource.dynamic")


class CapturedResponse(Protocol):
    url: str
    headers: Mapping[str, str]

    async def json(self) -> Any:
        ...


ResponsePredicate = Callable[[Any], bool]


class PageSession(Protocol):
    async def capture(
        self,
        url: str,
        predicate: ResponsePredicate,
        *,
        navigation_timeout: float,
        response_timeout: float,
    ) -> Optional[CapturedResponse]:
        """Navigate to ``url`` and return the first response matching ``predicate``.

        Returns ``None`` when nothing matches before ``response_timeout``.
        Raises `FetchError` when navigation itself fails.
        """
        ...


SessionFactory = Callable[[], AsyncContextManager[PageSession]]


class PlaywrightPageSession:
    """`PageSession` backed by a live Playwright page."""

    def __init__(self, page: Page) -> None:
        self._page = page

    async def capture(
        self,
        url: str,
        predicate: ResponsePredicate,
        *,
        navigation_timeout: float,
        response_timeout: float,
    ) -> Optional[CapturedResponse]:
        try:
            # Listen before navigating; the SPA may issue its data call during page load.
            async with self._page.expect_response(
                predicate, timeout=response_timeout * 1000
            ) as response_info:
                await self._page.goto(
                    url, wait_until="domcontentloaded", timeout=navigation_timeout * 1000
                )
            return await response_info.value
        except PlaywrightTimeoutError:
            logger.debug("Timed out waiting for data response from %s", url)
            return None
        except PlaywrightError as exc:
            raise FetchError(f"Navigation to {url} failed: {exc}") from exc


@asynccontextmanager
async def playwright_session(headless: bool = True) -> AsyncIterator[PlaywrightPageSession]:
    """Launch Chromium for one adapter invocation; the browser is always closed on exit."""
    async with async_playwright() as pw:
        try:
            browser = await pw.chromium.launch(headless=headless)
        except PlaywrightError as exc:
            raise FetchError(f"Browser launch failed: {exc}") from exc
        try:
            page = await browser.new_page(java_script_enabled=True)
            yield PlaywrightPageSession(page)
        finally:
            await browser.close()


def parse_winning_numbers(payload: Any) -> Dict[DrawPeriod, Optional[str]]:
    """Extract midday/evening digit strings from a game's results payload."""
    if not isinstance(payload, Mapping):
        raise ExtractionError("Results payload is not a JSON object")

    digits: Dict[DrawPeriod, Optional[str]] = {}
    for period in DrawPeriod:
        section = payload.get(period.value)
        numbers = section.get("winningNumbers") if isinstance(section, Mapping) else None
        if not isinstance(numbers, list) or not numbers:
            digits[period] = None
            continue
        digits[period] = "".join(str(number).strip() for number in numbers)
    return digits


@dataclass(frozen=True)
class GamePage:
    game: Game
    url: str
    response_token: str = ""


class DynamicSpaDataSource(ResultDataSource):
    """Read results from the official SPA by sniffing its background JSON call."""

    name = "dynamic"

    def __init__(
        self,
        settings: DynamicSourceSettings,
        *,
        session_factory: Optional[SessionFactory] = None,
        now: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self._settings = settings
        self._session_factory = session_factory or partial(
            playwright_session, headless=settings.headless
        )
        self._now = now or (lambda: dt.datetime.now(dt.timezone.utc))

    def games(self) -> Sequence[GamePage]:
        cfg = self._settings
        return (
            GamePage(Game.NUMBERS, cfg.numbers_url, cfg.numbers_response_token),
            GamePage(Game.WIN4, cfg.win4_url, cfg.win4_response_token),
        )

    def response_predicate(self, page: GamePage) -> ResponsePredicate:
        host = self._settings.response_host

        def matches(response: Any) -> bool:
            url = str(getattr(response, "url", "") or "")
            headers = getattr(response, "headers", None) or {}
            if host and host not in url:
                return False
            if page.response_token and page.response_token not in url:
                return False
            return bool(JSON_CONTENT_TYPE.search(headers.get("content-type", "")))

        return matches

    async def fetch_latest(self) -> DrawResult:
        by_game: Dict[Game, Dict[DrawPeriod, Optional[str]]] = {}
        async with self._session_factory() as session:
            for page in self.games():
                by_game[page.game] = await self._read_game(session, page)

        numbers = by_game[Game.NUMBERS]
        win4 = by_game[Game.WIN4]
        return DrawResult(
            observation_date=self._now(),
            midday=compose(numbers[DrawPeriod.MIDDAY], win4[DrawPeriod.MIDDAY], DrawPeriod.MIDDAY),
            evening=compose(
                numbers[DrawPeriod.EVENING], win4[DrawPeriod.EVENING], DrawPeriod.EVENING
            ),
        )

    async def _read_game(
        self, session: PageSession, page: GamePage
    ) -> Dict[DrawPeriod, Optional[str]]:
        empty: Dict[DrawPeriod, Optional[str]] = {period: None for period in DrawPeriod}
        cfg = self._settings
        try:
            response = await session.capture(
                page.url,
                self.response_predicate(page),
                navigation_timeout=cfg.navigation_timeout_seconds,
                response_timeout=cfg.response_timeout_seconds,
            )
        except SourceError as exc:
            logger.warning("%s page unavailable: %s", page.game.value, exc)
            return empty

        if response is None:
            logger.warning(
                "No %s results response within %ss", page.game.value, cfg.response_timeout_seconds
            )
            return empty

        try:
            payload = await response.json()
            return parse_winning_numbers(payload)
        except (ValueError, TypeError, SourceError, PlaywrightError) as exc:
            logger.warning(
                "Unreadable %s results payload from %s: %s", page.game.value, response.url, exc
            )
            return empty
