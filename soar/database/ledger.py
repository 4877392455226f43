"""
Sync Ledger - per-user record of entities already mirrored to memory.

The synchronizer reads the ledger to skip entities that were synced
before, and appends to it after each successful memory write. The
ledger only grows: IDs are never removed.

mark_synced is a single INSERT ... ON CONFLICT DO NOTHING (INSERT
IGNORE on MySQL), i.e. an atomic set union. Concurrent syncs for one
user (two quick logins) therefore cannot drop each other's IDs the way
a read-modify-write of an ID array would.
"""
from datetime import datetime
from typing import Iterable, Optional, Set

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from soar.core.exceptions import LedgerError
from soar.core.logging_config import get_logger
from soar.database.connection import DatabaseConnection, get_database
from soar.database.models import SyncedEntity
from soar.models.sync import SyncKind, SyncLedgerEntry

logger = get_logger(__name__)


class SyncLedger:
    """
    Read and extend the sync ledger.

    Example:
        >>> ledger = SyncLedger()
        >>> ledger.mark_synced("u1", SyncKind.TRIP, ["t1"])
        >>> ledger.get_entry("u1").synced_trip_ids
        {'t1'}
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db or get_database()

    def get_entry(self, user_id: str) -> SyncLedgerEntry:
        """
        Load a user's ledger entry.

        A user who never synced gets an entry with empty sets.

        Raises:
            LedgerError: if the database cannot be read
        """
        entry = SyncLedgerEntry(owner_user_id=user_id)
        stmt = select(SyncedEntity.entity_type, SyncedEntity.entity_id).where(
            SyncedEntity.user_id == user_id
        )

        try:
            with self.db.get_session() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            raise LedgerError(f"Could not read sync ledger for user {user_id}: {e}") from e

        for entity_type, entity_id in rows:
            try:
                entry.ids_for(SyncKind(entity_type)).add(entity_id)
            except ValueError:
                logger.warning(f"Ignoring ledger row with unknown entity_type={entity_type!r}")

        return entry

    def get_synced_ids(self, user_id: str, kind: SyncKind) -> Set[str]:
        """IDs of one kind already synced for a user."""
        return self.get_entry(user_id).ids_for(kind)

    def mark_synced(self, user_id: str, kind: SyncKind, entity_ids: Iterable[str]) -> None:
        """
        Add IDs to a user's synced set.

        Only the given kind is touched; IDs already present are left as-is.

        Raises:
            LedgerError: if the write fails
        """
        now = datetime.utcnow()
        rows = [
            {"user_id": user_id, "entity_type": kind.value, "entity_id": entity_id, "synced_at": now}
            for entity_id in dict.fromkeys(entity_ids)
        ]
        if not rows:
            return

        try:
            stmt = self._insert_ignore(rows)
            with self.db.get_session() as session:
                session.execute(stmt)
        except SQLAlchemyError as e:
            raise LedgerError(f"Could not update sync ledger for user {user_id}: {e}") from e

        logger.debug(f"Ledger updated: user={user_id}, kind={kind.value}, ids={len(rows)}")

    def _insert_ignore(self, rows):
        table = SyncedEntity.__table__
        dialect = self.db.dialect_name

        if dialect == "sqlite":
            return sqlite_insert(table).values(rows).on_conflict_do_nothing()
        if dialect == "postgresql":
            return postgresql_insert(table).values(rows).on_conflict_do_nothing()
        if dialect in ("mysql", "mariadb"):
            return insert(table).values(rows).prefix_with("IGNORE")

        raise LedgerError(f"Unsupported ledger database backend: {dialect}")


# Module-level instance (singleton pattern)
_ledger: Optional[SyncLedger] = None


def get_ledger() -> SyncLedger:
    """Get or create the shared SyncLedger."""
    global _ledger
    if _ledger is None:
        _ledger = SyncLedger()
    return _ledger


def reset_ledger() -> None:
    """Forget the shared SyncLedger (useful for testing)."""
    global _ledger
    _ledger = None
