"""
Database Initialization - Create the sync ledger table.

Called from the API lifespan on startup; can also be run directly.
"""
from typing import Optional

from soar.core.logging_config import get_logger
from soar.database.connection import DatabaseConnection, get_database
from soar.database.models import Base

logger = get_logger(__name__)


def init_ledger_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create ledger tables if they don't exist.

    Returns:
        True if tables were created successfully
    """
    try:
        engine = (db or get_database()).engine
        Base.metadata.create_all(engine)
        logger.info("Sync ledger tables initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize sync ledger tables: {e}")
        raise


def drop_ledger_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Drop ledger tables (use with caution!).

    Every user's next sync will then re-write all of their memories.

    Returns:
        True if tables were dropped successfully
    """
    try:
        engine = (db or get_database()).engine
        Base.metadata.drop_all(engine)
        logger.warning("Sync ledger tables dropped")
        return True

    except Exception as e:
        logger.error(f"Failed to drop sync ledger tables: {e}")
        raise


if __name__ == "__main__":
    # Allow running directly to create tables
    print("Initializing sync ledger tables...")
    init_ledger_tables()
    print("Done!")
