"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- chat.py   : Conversational endpoint
- sync.py   : Trip / flight booking memory sync
- health.py : Health check endpoints
"""
from soar.api.routes.chat import router as chat_router
from soar.api.routes.health import router as health_router
from soar.api.routes.sync import router as sync_router

__all__ = [
    "chat_router",
    "health_router",
    "sync_router",
]
