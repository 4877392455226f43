"""
Database module - sync ledger persistence.

This module handles:
- Database connection management
- The memory sync ledger (which trips/bookings are already in memory)
- Table creation
"""
from soar.database.connection import DatabaseConnection, get_database, reset_database
from soar.database.models import Base, SyncedEntity
from soar.database.ledger import SyncLedger, get_ledger, reset_ledger
from soar.database.init_db import init_ledger_tables, drop_ledger_tables

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "reset_database",
    # Models
    "Base",
    "SyncedEntity",
    # Ledger
    "SyncLedger",
    "get_ledger",
    "reset_ledger",
    # Init
    "init_ledger_tables",
    "drop_ledger_tables",
]
