"""
Prompts module - LLM prompt templates.

Prompts are stored as separate Python files for:
- Version control of prompt changes
- Clear documentation of prompt purpose
"""
from soar.llm.prompts.chat_prompts import (
    ACKNOWLEDGMENT_SYSTEM_PROMPT,
    ASSISTANT_SYSTEM_PROMPT,
    CLASSIFIER_SYSTEM_PROMPT,
    SEARCH_FORMAT_SYSTEM_PROMPT,
    format_memory_context,
    format_prompt_date,
    get_acknowledgment_prompt,
    get_classification_prompt,
    get_response_user_prompt,
    get_search_format_prompt,
)

__all__ = [
    "ACKNOWLEDGMENT_SYSTEM_PROMPT",
    "ASSISTANT_SYSTEM_PROMPT",
    "CLASSIFIER_SYSTEM_PROMPT",
    "SEARCH_FORMAT_SYSTEM_PROMPT",
    "format_memory_context",
    "format_prompt_date",
    "get_acknowledgment_prompt",
    "get_classification_prompt",
    "get_response_user_prompt",
    "get_search_format_prompt",
]
