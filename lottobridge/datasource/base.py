from __future__ import annotations

import abc

from ..types import DrawResult


class SourceError(RuntimeError):
    """Raised when an upstream source cannot supply a usable value."""


class FetchError(SourceError):
    """Transient failure: timeout, connection error, HTTP error or browser failure."""


class ExtractionError(SourceError):
    """The upstream document no longer has the expected structure."""


class ResultDataSource(abc.ABC):
    """Abstract draw result provider."""

    name = "source"

    @abc.abstractmethod
    async def fetch_latest(self) -> DrawResult:
        """Return the latest draw results this source can confirm.

        Per-field failures are reduced to ``None`` fields. Implementations
        may raise `SourceError` when the source is unavailable as a whole.
        """

    async def close(self) -> None:
        """Optional hook for connectors that require cleanup."""
        return None
