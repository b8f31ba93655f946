"""Append-only log of processed market actions"""
from typing import Optional

import structlog

from punks_indexer.models.event import Event, EventType
from punks_indexer.schemas.events import EventRecord
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def record_event(
    store: EntityStore,
    meta: EventRecord,
    event_type: EventType,
    token_id: str,
    from_account: Optional[str],
    to_account: Optional[str],
    value: int,
    usd: int,
) -> Event:
    """
    Write the log record for ``meta``.

    Records are write-once: if the id is already present the stored record
    is returned untouched.
    """
    event_id = meta.event_id
    existing = await store.load(Event, event_id)
    if existing is not None:
        logger.warning("Event already recorded", id=event_id, type=existing.type.value)
        return existing

    event = Event(
        id=event_id,
        transaction_hash=meta.transaction_hash,
        type=event_type,
        token_id=token_id,
        from_account=from_account,
        to_account=to_account,
        value=value,
        usd=usd,
        block_number=meta.block_number,
        block_timestamp=meta.block_timestamp,
    )
    await store.save(event)
    return event
