from __future__ import annotations

import logging
import re
from typing import Optional

from .types import DrawPeriod

DRAW_PATTERN = re.compile(r"\d{3}-\d{4}", re.ASCII)

logger = logging.getLogger("lottobridge.validation")


def validate(candidate: Optional[str], kind: DrawPeriod) -> Optional[str]:
    """Return ``candidate`` unchanged when it is a ``DDD-DDDD`` draw, else ``None``."""
    if candidate is not None and DRAW_PATTERN.fullmatch(candidate):
        return candidate
    logger.debug("Discarding malformed %s result: %r", kind.value, candidate)
    return None


def compose(three: Optional[str], four: Optional[str], kind: DrawPeriod) -> Optional[str]:
    """Join the 3-digit and 4-digit halves of one drawing.

    A missing half yields ``None`` rather than a partial composite.
    """
    if not three or not four:
        return None
    return validate(f"{three}-{four}", kind)
