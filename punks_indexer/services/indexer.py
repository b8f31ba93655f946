"""Sequential market event indexer"""
from dataclasses import dataclass
from typing import Any, AsyncIterable, Dict, Iterable, Optional, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from punks_indexer.models.cursor import SyncCursor
from punks_indexer.schemas.events import EventRecord
from punks_indexer.services.event_processor import EventProcessor

logger = structlog.get_logger()

DEFAULT_SOURCE = "market"


class EventProcessingError(Exception):
    """Applying an event failed; its transaction was rolled back."""

    def __init__(self, event_id: str, cause: Exception):
        super().__init__(f"Failed to process event {event_id}: {cause}")
        self.event_id = event_id
        self.cause = cause


@dataclass
class IndexerStats:
    processed: int = 0
    skipped: int = 0


class MarketIndexer:
    """
    Feeds decoded events to the processor one at a time.

    Features:
    - Each event is applied inside its own database transaction
    - A per-source cursor is saved with the event, so replaying a stream
      skips everything already applied
    - Failures roll back the event and stop the run
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        processor: EventProcessor,
        source: str = DEFAULT_SOURCE,
        log_every: int = 1000,
    ):
        self.session_factory = session_factory
        self.processor = processor
        self.source = source
        self.log_every = log_every
        self.stats = IndexerStats()

    async def process(self, event: EventRecord) -> bool:
        """Apply one event; returns False if the cursor was already past it"""
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    cursor = await session.get(SyncCursor, self.source)
                    if cursor is not None and event.position <= (cursor.block_number, cursor.log_index):
                        logger.warning(
                            "Skipping already applied event",
                            id=event.event_id,
                            position=event.position,
                            cursor=(cursor.block_number, cursor.log_index),
                        )
                        self.stats.skipped += 1
                        return False

                    await self.processor.process_event(session, event)

                    if cursor is None:
                        cursor = SyncCursor(id=self.source, events_applied=0)
                        session.add(cursor)
                    cursor.block_number = event.block_number
                    cursor.log_index = event.log_index
                    cursor.transaction_hash = event.transaction_hash
                    cursor.events_applied = (cursor.events_applied or 0) + 1
            except Exception as e:
                logger.error(
                    "Failed to process event",
                    id=event.event_id,
                    block=event.block_number,
                    error=str(e),
                    exc_info=True,
                )
                raise EventProcessingError(event.event_id, e) from e

        self.stats.processed += 1
        if self.log_every and self.stats.processed % self.log_every == 0:
            logger.info(
                "Indexing progress",
                processed=self.stats.processed,
                skipped=self.stats.skipped,
                block=event.block_number,
            )
        return True

    async def run(
        self,
        events: Union[Iterable[EventRecord], AsyncIterable[EventRecord]],
    ) -> IndexerStats:
        """Apply every event from a sync or async iterable, in order"""
        logger.info("Starting market indexer", source=self.source)

        if hasattr(events, "__aiter__"):
            async for event in events:
                await self.process(event)
        else:
            for event in events:
                await self.process(event)

        logger.info(
            "Indexing complete",
            source=self.source,
            processed=self.stats.processed,
            skipped=self.stats.skipped,
        )
        return self.stats

    async def get_sync_status(self) -> Dict[str, Any]:
        """Get indexer sync status"""
        async with self.session_factory() as session:
            cursor: Optional[SyncCursor] = await session.get(SyncCursor, self.source)

        return {
            "source": self.source,
            "block_number": cursor.block_number if cursor else None,
            "log_index": cursor.log_index if cursor else None,
            "transaction_hash": cursor.transaction_hash if cursor else None,
            "events_applied": cursor.events_applied if cursor else 0,
            "processed": self.stats.processed,
            "skipped": self.stats.skipped,
        }
