"""Time-bucketed aggregate market snapshots"""
from sqlalchemy import Column, String, BigInteger, Integer, JSON

from punks_indexer.models.database import Base
from punks_indexer.models.types import Wei


class State(Base):
    """
    Aggregate market statistics for one time bucket.

    Counters (listings, delistings, bids, sales, volume) are per bucket.
    ``owners`` and ``active_listings`` carry forward from the nearest earlier
    snapshot when a new bucket opens.
    """
    __tablename__ = "states"

    id = Column(String(32), primary_key=True)  # bucket id
    timestamp = Column(BigInteger, nullable=False, index=True)  # first block time seen in bucket
    floor = Column(Wei, nullable=False, default=0)
    volume = Column(Wei, nullable=False, default=0)
    top_bid = Column(String(80), nullable=True)  # Event id
    top_sale = Column(String(80), nullable=True)  # Event id
    bids = Column(Integer, nullable=False, default=0)
    sales = Column(Integer, nullable=False, default=0)
    listings = Column(Integer, nullable=False, default=0)
    delistings = Column(Integer, nullable=False, default=0)
    owners = Column(Integer, nullable=False, default=0)
    active_listings = Column(JSON, nullable=False, default=list)
    usd = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<State {self.id} floor={self.floor} owners={self.owners}>"
