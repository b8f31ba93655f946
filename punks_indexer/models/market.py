"""Listing and bid models (one of each per punk at most)"""
from sqlalchemy import Column, String, Boolean, BigInteger

from punks_indexer.models.database import Base
from punks_indexer.models.types import Wei


class Listing(Base):
    """Active offer to sell a punk; keyed by the punk id"""
    __tablename__ = "listings"

    id = Column(String(8), primary_key=True)
    punk = Column(String(8), nullable=False)
    value = Column(Wei, nullable=False, default=0)
    usd = Column(BigInteger, nullable=False, default=0)
    from_account = Column(String(42), nullable=False, index=True)
    to_account = Column(String(42), nullable=True)  # restricted buyer, zero address when public
    is_private = Column(Boolean, nullable=False, default=False)
    block_number = Column(BigInteger, nullable=False)
    block_timestamp = Column(BigInteger, nullable=False)
    transaction_hash = Column(String(66), nullable=False)

    def __repr__(self):
        return f"<Listing #{self.id} value={self.value} private={self.is_private}>"


class Bid(Base):
    """Active bid on a punk; a newer bid replaces it outright"""
    __tablename__ = "bids"

    id = Column(String(8), primary_key=True)
    punk = Column(String(8), nullable=False)
    value = Column(Wei, nullable=False, default=0)
    usd = Column(BigInteger, nullable=False, default=0)
    from_account = Column(String(42), nullable=False, index=True)
    block_number = Column(BigInteger, nullable=False)
    block_timestamp = Column(BigInteger, nullable=False)
    transaction_hash = Column(String(66), nullable=False)

    def __repr__(self):
        return f"<Bid #{self.id} value={self.value} from={self.from_account[:10]}...>"
