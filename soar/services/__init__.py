"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- No SQL (the sync ledger lives in database/)
- Orchestrate between the LLM client, the memory store and the ledger
"""
from soar.services.background import (
    BackgroundTaskRunner,
    get_background_runner,
    shutdown_background_runner,
)
from soar.services.chat_service import ChatService, get_chat_service, reset_chat_service
from soar.services.sync_service import MemorySyncService, get_sync_service, reset_sync_service

__all__ = [
    "BackgroundTaskRunner",
    "get_background_runner",
    "shutdown_background_runner",
    "ChatService",
    "get_chat_service",
    "reset_chat_service",
    "MemorySyncService",
    "get_sync_service",
    "reset_sync_service",
]
