from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class FlaskSettings:
    debug: bool = False


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    port: int = 3000
    log_level: str = "info"
    cors_origins: Tuple[str, ...] = ("*",)


def _parse_origins(raw: str) -> Tuple[str, ...]:
    raw = raw.strip()
    if raw == "*" or not raw:
        return ("*",)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(debug=os.getenv("FLASK_DEBUG", "0") == "1")

    port = os.getenv("PORT")
    return AppSettings(
        flask=flask_settings,
        port=int(port) if port else 3000,
        log_level=os.getenv("LOG_LEVEL", "info"),
        cors_origins=_parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*")),
    )
