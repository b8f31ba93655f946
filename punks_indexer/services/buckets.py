"""Time bucket ids for aggregate snapshots"""
from dataclasses import dataclass

DAY_SECONDS = 86400


def timestamp_to_id(timestamp: int, lookback: int = 0, bucket_seconds: int = DAY_SECONDS) -> str:
    """Bucket id for a block timestamp, optionally ``lookback`` buckets earlier"""
    return str(timestamp // bucket_seconds - lookback)


@dataclass(frozen=True)
class SnapshotPolicy:
    """How snapshots are bucketed, carried forward and priced."""
    bucket_seconds: int = DAY_SECONDS
    lookback_limit: int = 30
    floor_min_listings: int = 5

    def bucket_id(self, timestamp: int, lookback: int = 0) -> str:
        return timestamp_to_id(timestamp, lookback, self.bucket_seconds)
