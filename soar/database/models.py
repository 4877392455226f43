"""
Database Models - SQLAlchemy ORM models for the sync ledger.

The ledger is stored as one row per synced entity rather than one
document per user holding ID arrays. Adding an ID is then a single
insert that either lands or is ignored, so two syncs for the same
user can never overwrite each other's progress.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SyncedEntity(Base):
    """
    One entity (trip or flight booking) mirrored into the memory store.

    The composite primary key makes (user, type, id) unique, which is
    what the insert-ignore in SyncLedger.mark_synced relies on.
    """
    __tablename__ = "memory_sync_ledger"

    user_id = Column(String(128), primary_key=True)
    entity_type = Column(String(32), primary_key=True)  # 'trip', 'flight_booking'
    entity_id = Column(String(128), primary_key=True)
    synced_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_memory_sync_ledger_user", "user_id"),
    )
