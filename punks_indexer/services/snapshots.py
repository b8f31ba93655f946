"""Per-bucket aggregate snapshots with carry-forward of cross-bucket state"""
from typing import Optional

import structlog

from punks_indexer.models.state import State
from punks_indexer.services.buckets import SnapshotPolicy
from punks_indexer.services.floor import get_floor_from_active_listings
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def find_previous_state(
    store: EntityStore,
    timestamp: int,
    policy: SnapshotPolicy,
) -> Optional[State]:
    """Nearest earlier snapshot, searching at most ``policy.lookback_limit`` buckets back"""
    for lookback in range(1, policy.lookback_limit + 1):
        previous = await store.load(State, policy.bucket_id(timestamp, lookback))
        if previous is not None:
            return previous
    return None


async def get_or_create_state(
    store: EntityStore,
    timestamp: int,
    policy: SnapshotPolicy,
) -> State:
    """
    Snapshot for the bucket containing ``timestamp``.

    A new bucket starts with zeroed period counters; the owner count and the
    active-listing set are copied from the nearest earlier snapshot.
    """
    state_id = policy.bucket_id(timestamp)
    state = await store.load(State, state_id)
    if state is not None:
        return state

    previous = await find_previous_state(store, timestamp, policy)

    state = State(
        id=state_id,
        timestamp=timestamp,
        floor=0,
        volume=0,
        top_bid=None,
        top_sale=None,
        bids=0,
        sales=0,
        listings=0,
        delistings=0,
        owners=previous.owners if previous is not None else 0,
        active_listings=list(previous.active_listings or []) if previous is not None else [],
        usd=0,
    )
    if state.active_listings:
        state.floor = await get_floor_from_active_listings(store, state, policy)

    await store.save(state)
    logger.debug(
        "Opened snapshot",
        state=state_id,
        carried_from=previous.id if previous is not None else None,
        owners=state.owners,
        active_listings=len(state.active_listings),
    )
    return state


def add_active_listing(state: State, punk_id: str) -> None:
    active = list(state.active_listings or [])
    if punk_id not in active:
        active.append(punk_id)
    state.active_listings = active


def remove_active_listing(state: State, punk_id: str) -> bool:
    """Drop ``punk_id`` from the active set; returns True if it was there"""
    active = list(state.active_listings or [])
    if punk_id not in active:
        return False
    state.active_listings = [i for i in active if i != punk_id]
    return True
