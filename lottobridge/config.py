from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _bool_from_env(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


@dataclass(frozen=True)
class StaticSourceSettings:
    midday_numbers_url: str = "https://www.lotteryusa.com/new-york/midday-numbers/"
    midday_win4_url: str = "https://www.lotteryusa.com/new-york/midday-win-4/"
    evening_numbers_url: str = "https://www.lotteryusa.com/new-york/numbers/"
    evening_win4_url: str = "https://www.lotteryusa.com/new-york/win-4/"
    heading_marker: str = "Latest numbers"
    timeout_seconds: int = 15


@dataclass(frozen=True)
class DynamicSourceSettings:
    numbers_url: str = "https://nylottery.ny.gov/draw-game/?game=numbers"
    win4_url: str = "https://nylottery.ny.gov/draw-game/?game=win4"
    response_host: str = "nylottery.ny.gov"
    numbers_response_token: str = ""
    win4_response_token: str = ""
    navigation_timeout_seconds: int = 30
    response_timeout_seconds: int = 15
    headless: bool = True


@dataclass(frozen=True)
class BridgeSettings:
    static: StaticSourceSettings = field(default_factory=StaticSourceSettings)
    dynamic: DynamicSourceSettings = field(default_factory=DynamicSourceSettings)
    cache_ttl_seconds: int = 60
    timezone: str = "America/New_York"

    def copy(self, **updates) -> "BridgeSettings":
        return replace(self, **updates)


def load_from_environment() -> BridgeSettings:
    static_defaults = StaticSourceSettings()
    static = StaticSourceSettings(
        midday_numbers_url=os.getenv(
            "STATIC__MIDDAY_NUMBERS_URL", static_defaults.midday_numbers_url
        ),
        midday_win4_url=os.getenv("STATIC__MIDDAY_WIN4_URL", static_defaults.midday_win4_url),
        evening_numbers_url=os.getenv(
            "STATIC__EVENING_NUMBERS_URL", static_defaults.evening_numbers_url
        ),
        evening_win4_url=os.getenv("STATIC__EVENING_WIN4_URL", static_defaults.evening_win4_url),
        heading_marker=os.getenv("STATIC__HEADING_MARKER", static_defaults.heading_marker),
        timeout_seconds=_int_from_env(os.getenv("STATIC__TIMEOUT_SECONDS"), 15),
    )

    dynamic_defaults = DynamicSourceSettings()
    dynamic = DynamicSourceSettings(
        numbers_url=os.getenv("DYNAMIC__NUMBERS_URL", dynamic_defaults.numbers_url),
        win4_url=os.getenv("DYNAMIC__WIN4_URL", dynamic_defaults.win4_url),
        response_host=os.getenv("DYNAMIC__RESPONSE_HOST", dynamic_defaults.response_host),
        numbers_response_token=os.getenv("DYNAMIC__NUMBERS_RESPONSE_TOKEN", ""),
        win4_response_token=os.getenv("DYNAMIC__WIN4_RESPONSE_TOKEN", ""),
        navigation_timeout_seconds=_int_from_env(
            os.getenv("DYNAMIC__NAVIGATION_TIMEOUT_SECONDS"), 30
        ),
        response_timeout_seconds=_int_from_env(
            os.getenv("DYNAMIC__RESPONSE_TIMEOUT_SECONDS"), 15
        ),
        headless=_bool_from_env(os.getenv("DYNAMIC__HEADLESS"), True),
    )

    return BridgeSettings(
        static=static,
        dynamic=dynamic,
        cache_ttl_seconds=_int_from_env(os.getenv("CACHE_TTL_SECONDS"), 60),
        timezone=os.getenv("JURISDICTION_TIMEZONE", "America/New_York"),
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> BridgeSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
