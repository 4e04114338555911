from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class DrawPeriod(str, Enum):
    MIDDAY = "midday"
    EVENING = "evening"


class Game(str, Enum):
    NUMBERS = "numbers"
    WIN4 = "win4"

    @property
    def digits(self) -> int:
        return 3 if self is Game.NUMBERS else 4


def to_iso(value: dt.datetime) -> str:
    """Render an aware datetime as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    utc = value.astimezone(dt.timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class DrawResult:
    """Normalized draw payload returned by data sources and by reconciliation."""

    observation_date: dt.datetime
    midday: Optional[str] = None
    evening: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.midday is not None and self.evening is not None

    def field(self, period: DrawPeriod) -> Optional[str]:
        return self.midday if period is DrawPeriod.MIDDAY else self.evening

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "dateISO": to_iso(self.observation_date),
            "midday": self.midday,
            "evening": self.evening,
        }
