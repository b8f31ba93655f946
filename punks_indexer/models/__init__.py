"""Database models"""
from punks_indexer.models.database import Base, init_db, close_db
from punks_indexer.models.account import Account, Punk
from punks_indexer.models.market import Listing, Bid
from punks_indexer.models.event import Event, EventType
from punks_indexer.models.transfer import Transfer
from punks_indexer.models.state import State
from punks_indexer.models.cursor import SyncCursor

__all__ = [
    "Base",
    "init_db",
    "close_db",
    "Account",
    "Punk",
    "Listing",
    "Bid",
    "Event",
    "EventType",
    "Transfer",
    "State",
    "SyncCursor",
]
