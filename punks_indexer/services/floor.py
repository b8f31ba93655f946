"""Market floor price from the active listings of a snapshot"""
from typing import Optional

import structlog

from punks_indexer.models.market import Listing
from punks_indexer.models.state import State
from punks_indexer.services.buckets import SnapshotPolicy
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def get_floor_from_active_listings(
    store: EntityStore,
    state: State,
    policy: SnapshotPolicy,
) -> int:
    """
    Compute the floor for ``state``.

    With fewer than ``policy.floor_min_listings`` active listings the market
    is too thin to price, so the floor of the immediately preceding bucket is
    used (zero when that bucket has no snapshot). Otherwise the floor is the
    lowest positive ask among listings that still exist.
    """
    previous = await store.load(State, policy.bucket_id(state.timestamp, 1))
    previous_floor = previous.floor if previous is not None else 0

    active = state.active_listings or []
    if len(active) < policy.floor_min_listings:
        return previous_floor

    floor: Optional[int] = None
    for punk_id in active:
        listing = await store.load(Listing, punk_id)
        if listing is None or not listing.value or listing.value <= 0:
            continue
        if floor is None or listing.value < floor:
            floor = listing.value

    return floor if floor is not None else 0


async def recompute_floor(store: EntityStore, state: State, policy: SnapshotPolicy) -> int:
    """Recompute and assign ``state.floor``; returns the new floor"""
    floor = await get_floor_from_active_listings(store, state, policy)
    if floor != state.floor:
        logger.debug("Floor changed", state=state.id, old=state.floor, new=floor)
    state.floor = floor
    return floor


def lower_floor_for_offer(state: State, value: int, is_private: bool) -> bool:
    """Fast path for a new public ask below the floor; returns True if applied"""
    if is_private or value == 0 or value >= state.floor:
        return False
    logger.debug("Floor lowered by offer", state=state.id, old=state.floor, new=value)
    state.floor = value
    return True
