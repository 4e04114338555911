from ..types import DrawResult
from .base import ExtractionError, FetchError, ResultDataSource, SourceError
from .dynamic_spa import DynamicSpaDataSource
from .static_html import StaticHtmlDataSource

__all__ = [
    "DrawResult",
    "ExtractionError",
    "FetchError",
    "ResultDataSource",
    "SourceError",
    "DynamicSpaDataSource",
    "StaticHtmlDataSource",
]
