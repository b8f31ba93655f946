"""Append-only market event log"""
import enum
from sqlalchemy import Column, String, BigInteger, Enum as SQLEnum

from punks_indexer.models.database import Base
from punks_indexer.models.types import Wei


class EventType(str, enum.Enum):
    """Kinds of recorded market actions."""
    CLAIMED = "Claimed"
    TRANSFERRED = "Transferred"
    WRAPPED = "Wrapped"
    UNWRAPPED = "Unwrapped"
    OFFERED = "Offered"
    OFFER_WITHDRAWN = "OfferWithdrawn"
    BID_ENTERED = "BidEntered"
    BID_WITHDRAWN = "BidWithdrawn"
    SALE = "Sale"


class Event(Base):
    """
    Immutable record of one processed market action.

    Identified by ``<transaction hash>-<log index>``; written once and never
    updated or deleted.
    """
    __tablename__ = "events"

    id = Column(String(80), primary_key=True)
    transaction_hash = Column(String(66), nullable=False, index=True)
    type = Column(SQLEnum(EventType, native_enum=False, length=20), nullable=False, index=True)
    token_id = Column(String(8), nullable=False, index=True)
    from_account = Column(String(42), nullable=True)
    to_account = Column(String(42), nullable=True)
    value = Column(Wei, nullable=False, default=0)
    usd = Column(BigInteger, nullable=False, default=0)
    block_number = Column(BigInteger, nullable=False, index=True)
    block_timestamp = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<Event {self.type.value} #{self.token_id} ({self.id[:16]}...)>"
