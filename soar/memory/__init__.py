"""
Memory Package - remote memory store access and memory text.

- client.py     : MemoryStoreClient (add / search against the store)
- formatting.py : trip and booking descriptions, temporal labels,
                  top-N selection and the plain-text fallback reply
"""
from soar.memory.client import MemoryStoreClient, get_memory_client, reset_memory_client
from soar.memory.formatting import (
    TemporalLabel,
    build_fallback_response,
    describe_flight,
    describe_flight_booking,
    describe_trip,
    select_top_memories,
    temporal_label,
)

__all__ = [
    "MemoryStoreClient",
    "get_memory_client",
    "reset_memory_client",
    "TemporalLabel",
    "build_fallback_response",
    "describe_flight",
    "describe_flight_booking",
    "describe_trip",
    "select_top_memories",
    "temporal_label",
]
