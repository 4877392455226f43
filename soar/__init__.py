"""
Soar travel assistant backend.

This package is organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, errors and cross-cutting utilities
- services/  : Chat orchestration, memory sync, background writes
- llm/       : Chat-completion client and prompt templates
- memory/    : Memory store client and memory text formatting
- database/  : Sync ledger persistence
- models/    : Travel entities, memory records, API schemas
"""
__version__ = "0.1.0"
