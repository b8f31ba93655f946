"""Raw transfer records used to correlate sales inside one transaction"""
from sqlalchemy import Column, String

from punks_indexer.models.database import Base


class Transfer(Base):
    """Raw balance transfer seen in a transaction (one per transaction)"""
    __tablename__ = "transfers"

    id = Column(String(66), primary_key=True)  # transaction hash
    from_address = Column(String(42), nullable=False)
    to_address = Column(String(42), nullable=False)
    transaction_hash = Column(String(66), nullable=False)
    token_id = Column(String(8), nullable=True)  # set once a delisting in the same tx resolves it

    def __repr__(self):
        return f"<Transfer {self.id[:16]}... token={self.token_id}>"
