"""Indexer progress tracking"""
from datetime import datetime
from sqlalchemy import Column, String, BigInteger, Integer, DateTime

from punks_indexer.models.database import Base


class SyncCursor(Base):
    """Position of the last event applied from a named source"""
    __tablename__ = "sync_cursors"

    id = Column(String(64), primary_key=True)  # source name
    block_number = Column(BigInteger, nullable=False)
    log_index = Column(Integer, nullable=False)
    transaction_hash = Column(String(66), nullable=False)
    events_applied = Column(BigInteger, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<SyncCursor {self.id} block={self.block_number} log={self.log_index}>"
