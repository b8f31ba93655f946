"""Market indexing services"""
from .buckets import SnapshotPolicy, timestamp_to_id
from .pricing import PriceOracle, StaticPriceOracle
from .store import EntityStore
from .event_processor import EventProcessor, MarketConfig
from .indexer import EventProcessingError, IndexerStats, MarketIndexer
from .sources import read_events

__all__ = [
    "SnapshotPolicy",
    "timestamp_to_id",
    "PriceOracle",
    "StaticPriceOracle",
    "EntityStore",
    "EventProcessor",
    "MarketConfig",
    "EventProcessingError",
    "IndexerStats",
    "MarketIndexer",
    "read_events",
]
