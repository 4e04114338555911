from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from .cache import ResultCache
from .config import BridgeSettings, load_config
from .datasource import DrawResult, DynamicSpaDataSource, StaticHtmlDataSource
from .query import QueryService
from .reconciler import ReconciliationEngine

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "info") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )


def build_engine(settings: BridgeSettings) -> ReconciliationEngine:
    static = StaticHtmlDataSource(settings.static, timezone=settings.timezone)
    dynamic = DynamicSpaDataSource(settings.dynamic)
    return ReconciliationEngine(static, dynamic)


def build_query_service(settings: BridgeSettings) -> QueryService:
    return QueryService(build_engine(settings), ResultCache(settings.cache_ttl_seconds))


async def run(args: argparse.Namespace) -> DrawResult:
    settings = load_config(args.env_file)
    configure_logging("debug" if args.verbose else "info")

    engine = build_engine(settings)
    try:
        return await engine.reconcile()
    finally:
        await engine.close()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch the latest reconciled NY draw results")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    try:
        result = asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Interrupted by user.")
        return
    print(json.dumps(result.to_dict(), indent=2))


if __name__ == "__main__":
    main()
