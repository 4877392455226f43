"""
LLM module - Language model integration.

This module handles all LLM interactions:
- Prompt construction (prompts/)
- Chat-completion API calls
- Classification parsing
"""
from soar.llm.client import LLMClient, MessageType, get_llm_client, parse_classification, reset_llm_client

__all__ = [
    "LLMClient",
    "MessageType",
    "get_llm_client",
    "parse_classification",
    "reset_llm_client",
]
