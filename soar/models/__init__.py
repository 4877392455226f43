"""
Models module - data shapes shared across layers.

- memory.py : MemoryRecord returned by the memory store
- travel.py : Trip, Flight, Accommodation, FlightBooking snapshots
- sync.py   : Sync ledger entry, sync results, /sync API schemas
- chat.py   : /chat and /health API schemas
"""
from soar.models.chat import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ErrorResponse,
)
from soar.models.memory import MemoryRecord
from soar.models.sync import SyncKind, SyncLedgerEntry, SyncResult
from soar.models.travel import Accommodation, Flight, FlightBooking, Trip

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "ErrorResponse",
    "MemoryRecord",
    "SyncKind",
    "SyncLedgerEntry",
    "SyncResult",
    "Accommodation",
    "Flight",
    "FlightBooking",
    "Trip",
]
