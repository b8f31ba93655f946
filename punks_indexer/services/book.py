"""Listing and bid book: at most one of each per punk"""
from typing import Optional

import structlog

from punks_indexer.models.market import Bid, Listing
from punks_indexer.schemas.events import ZERO_ADDRESS, EventRecord
from punks_indexer.services.store import EntityStore

logger = structlog.get_logger()


async def open_listing(
    store: EntityStore,
    punk_id: str,
    value: int,
    usd: int,
    offerer: str,
    meta: EventRecord,
    restricted_buyer: Optional[str] = None,
    zero_address: str = ZERO_ADDRESS,
) -> Listing:
    """Create or overwrite the listing for ``punk_id``; a zero or missing buyer makes it public"""
    buyer = restricted_buyer or zero_address
    listing = await store.load(Listing, punk_id)
    if listing is None:
        listing = Listing(id=punk_id)

    listing.punk = punk_id
    listing.value = value
    listing.usd = usd
    listing.from_account = offerer
    listing.to_account = buyer
    listing.is_private = buyer != zero_address
    listing.block_number = meta.block_number
    listing.block_timestamp = meta.block_timestamp
    listing.transaction_hash = meta.transaction_hash
    await store.save(listing)
    return listing


async def close_listing(store: EntityStore, punk_id: str) -> bool:
    return await store.delete(Listing, punk_id)


async def open_bid(
    store: EntityStore,
    punk_id: str,
    value: int,
    usd: int,
    bidder: str,
    meta: EventRecord,
) -> Bid:
    """Create the bid for ``punk_id``, replacing any earlier bid regardless of value"""
    bid = await store.load(Bid, punk_id)
    if bid is None:
        bid = Bid(id=punk_id)

    bid.punk = punk_id
    bid.value = value
    bid.usd = usd
    bid.from_account = bidder
    bid.block_number = meta.block_number
    bid.block_timestamp = meta.block_timestamp
    bid.transaction_hash = meta.transaction_hash
    await store.save(bid)
    return bid


async def close_bid(store: EntityStore, punk_id: str) -> bool:
    return await store.delete(Bid, punk_id)


async def set_punk_no_longer_for_sale(
    store: EntityStore,
    punk_id: str,
    remove_bid: bool = False,
) -> None:
    """Close the listing, and the bid too when ``remove_bid`` is set"""
    closed_listing = await close_listing(store, punk_id)
    closed_bid = await close_bid(store, punk_id) if remove_bid else False
    logger.debug(
        "Punk no longer for sale",
        punk=punk_id,
        closed_listing=closed_listing,
        closed_bid=closed_bid,
    )
