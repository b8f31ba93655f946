"""Top bid and top sale tracking"""
from typing import Optional

import structlog

from punks_indexer.models.event import Event
from punks_indexer.models.state import State
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def load_top_event(store: EntityStore, event_id: Optional[str]) -> Optional[Event]:
    if event_id is None:
        return None
    return await store.load(Event, event_id)


async def outranks(store: EntityStore, current_top: Optional[str], value: int) -> bool:
    """
    Whether a candidate of ``value`` should replace ``current_top``.

    A missing top, or one recorded at zero, is always replaced. Otherwise the
    candidate must be strictly greater; ties keep the earlier event.
    """
    top = await load_top_event(store, current_top)
    if top is None or not top.value or top.value <= 0:
        return True
    return value > top.value


async def consider_bid(store: EntityStore, state: State, event_id: str, value: int) -> bool:
    """Make the bid event the snapshot's top bid if it outranks the current one"""
    if not await outranks(store, state.top_bid, value):
        return False
    logger.debug("Top bid replaced", state=state.id, previous=state.top_bid, top=event_id, value=value)
    state.top_bid = event_id
    return True


async def consider_sale(store: EntityStore, state: State, event_id: str, value: int) -> bool:
    """Make the sale event the snapshot's top sale if it outranks the current one"""
    if not await outranks(store, state.top_sale, value):
        return False
    logger.debug("Top sale replaced", state=state.id, previous=state.top_sale, top=event_id, value=value)
    state.top_sale = event_id
    return True
