"""Account and punk (asset ledger) models"""
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, JSON

from punks_indexer.models.database import Base


class Account(Base):
    """Address that has held, offered or bid on a punk"""
    __tablename__ = "accounts"

    id = Column(String(42), primary_key=True)  # lower-case hex address
    punks = Column(JSON, nullable=False, default=list)  # ids currently held
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Account {self.id[:10]}... ({len(self.punks or [])} punks)>"


class Punk(Base):
    """A single punk and its current owner"""
    __tablename__ = "punks"

    id = Column(String(8), primary_key=True)  # token id as string
    owner = Column(String(42), nullable=False, index=True)
    wrapped = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Punk #{self.id} owner={self.owner[:10]}...>"
