"""CryptoPunks Market Indexer - runtime wiring"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog

from punks_indexer.config import Settings, get_settings
from punks_indexer.models.database import close_db, get_session_factory, init_db
from punks_indexer.services.event_processor import EventProcessor, MarketConfig
from punks_indexer.services.indexer import DEFAULT_SOURCE, MarketIndexer
from punks_indexer.services.pricing import StaticPriceOracle
from punks_indexer.services.sources import read_events

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structured logging"""
    logging.basicConfig(format="%(message)s", level=level.upper())

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_indexer(settings: Optional[Settings] = None, source: str = DEFAULT_SOURCE) -> MarketIndexer:
    """Wire processor and indexer from settings"""
    settings = settings or get_settings()
    processor = EventProcessor(
        MarketConfig.from_settings(settings),
        oracle=StaticPriceOracle(settings.usd_price),
    )
    return MarketIndexer(get_session_factory(), processor, source=source)


async def replay(path: Union[str, Path], source: str = DEFAULT_SOURCE) -> Dict[str, Any]:
    """Create tables if needed and apply every event in a JSON Lines file"""
    settings = get_settings()
    logger.info(
        "Starting replay",
        app=settings.app_name,
        version=settings.app_version,
        market=settings.market_address,
        file=str(path),
    )

    await init_db()
    try:
        indexer = build_indexer(settings, source=source)
        await indexer.run(read_events(path))
        status = await indexer.get_sync_status()
        return {"market": settings.market_address, **status}
    finally:
        await close_db()


async def sync_status(source: str = DEFAULT_SOURCE) -> Dict[str, Any]:
    settings = get_settings()
    await init_db()
    try:
        status = await build_indexer(settings, source=source).get_sync_status()
        return {"market": settings.market_address, **status}
    finally:
        await close_db()


async def create_tables() -> None:
    await init_db()
    await close_db()
    logger.info("Database initialized")
