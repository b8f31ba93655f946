"""Decoded event schemas"""
from punks_indexer.schemas.events import (
    ZERO_ADDRESS,
    Assign,
    EventRecord,
    MarketEvent,
    PunkBidEntered,
    PunkBidWithdrawn,
    PunkBought,
    PunkNoLongerForSale,
    PunkOffered,
    PunkTransfer,
    RawTransfer,
    global_id,
    parse_event,
    parse_event_json,
)

__all__ = [
    "ZERO_ADDRESS",
    "Assign",
    "EventRecord",
    "MarketEvent",
    "PunkBidEntered",
    "PunkBidWithdrawn",
    "PunkBought",
    "PunkNoLongerForSale",
    "PunkOffered",
    "PunkTransfer",
    "RawTransfer",
    "global_id",
    "parse_event",
    "parse_event_json",
]
