"""
Chat Prompts - prompts for the travel-assistant chat pipeline.

One builder per LLM operation:
1. Message classification (QUERY / STATEMENT / WEB_SEARCH)
2. Memory-grounded replies with time awareness
3. Statement acknowledgments
4. Reformatting raw web-search results into the app's tone

Prompts that mention dates take `today` explicitly so callers (and
tests) control the date embedded in the text.
"""
from datetime import date
from typing import Sequence

from soar.models.memory import MemoryRecord


def format_prompt_date(today: date) -> str:
    """Long date used inside prompts, e.g. 'October 19, 2026'."""
    return f"{today:%B} {today.day}, {today.year}"


# ============================================================
# Classification
# ============================================================

CLASSIFIER_SYSTEM_PROMPT = "You are a message classifier that determines the type of user message."


def get_classification_prompt(message: str) -> str:
    """
    Build the one-word classification prompt.

    Args:
        message: Raw user message

    Returns:
        User prompt asking for exactly QUERY, STATEMENT or WEB_SEARCH
    """
    return f"""Determine if the following message is:
1. A QUERY (asking for information that can be answered from user's existing travel profile)
2. A STATEMENT (sharing information)
3. A WEB_SEARCH (asking for information that requires real-time data like visa requirements, travel advisories, travel restrictions, flight status, currency exchange, weather forecasts, etc.)

Respond with only one word: "QUERY", "STATEMENT", or "WEB_SEARCH".

Message: "{message}\""""


# ============================================================
# Memory-grounded replies
# ============================================================

ASSISTANT_SYSTEM_PROMPT = """You are a helpful travel assistant for the Soar app.
You should provide concise, accurate responses based on the user's travel data. Follow these guidelines:
1. Keep responses under 2-3 sentences when possible
2. Be warm and personable, but prioritize factual information
3. Directly address the user's question without unnecessary preamble
4. If you don't have enough information, clearly state what you know and what you don't
5. Never invent travel details that aren't in the provided context
6. Use natural, conversational language while maintaining professionalism
7. Highlight key information like dates, locations, and confirmation numbers when relevant"""


def format_memory_context(memories: Sequence[MemoryRecord]) -> str:
    """Numbered memory excerpts, one per line."""
    lines = ["Here is relevant information from their travel profile:"]
    for index, memory in enumerate(memories, start=1):
        lines.append(f"{index}. {memory.text}")
    return "\n".join(lines)


def get_response_user_prompt(query: str, memories: Sequence[MemoryRecord], today: date) -> str:
    """
    Build the reply prompt for a memory-backed question.

    Args:
        query: The user's question
        memories: Top-ranked memories (already limited by the caller)
        today: Date the reply is relative to

    Returns:
        User prompt with memories and time-awareness rules
    """
    current_date = format_prompt_date(today)
    return f"""You are a travel assistant for the Soar app. Today's date is {current_date}.

The user has asked: "{query}"

{format_memory_context(memories)}

IMPORTANT TIME AWARENESS INSTRUCTIONS:
- When responding about trips, be time-aware relative to today's date ({current_date})
- If the user asks about "upcoming trips" or "future trips", only mention trips marked as UPCOMING TRIP
- If the user asks about "past trips", only mention trips marked as PAST TRIP
- If the user asks about "current trip", only mention trips marked as CURRENT TRIP
- Apply the same rules to flights marked as PAST FLIGHT, CURRENT FLIGHT and UPCOMING FLIGHT
- Pay careful attention to the temporal markers (PAST, CURRENT, UPCOMING) in the memory information

Please craft a helpful, conversational response that addresses their question using this information.
If the information doesn't fully answer their question, acknowledge what you know and what you don't.
Keep your response friendly and concise."""


# ============================================================
# Acknowledgments
# ============================================================

ACKNOWLEDGMENT_SYSTEM_PROMPT = (
    "You are a helpful travel assistant chatbot that responds to users "
    "in a friendly, conversational way."
)


def get_acknowledgment_prompt(statement: str) -> str:
    """Prompt for a short acknowledgment of something the user shared."""
    return f"""The user has shared this statement: "{statement}"

Generate a friendly, engaging, and personalized acknowledgment response that:
1. Shows you understood what they shared
2. Has a positive, upbeat tone
3. Is brief (1-2 sentences)
4. Feels natural in a travel assistant conversation"""


# ============================================================
# Web search reformatting
# ============================================================

SEARCH_FORMAT_SYSTEM_PROMPT = """You are a helpful travel assistant for the Soar app.
You should provide concise, accurate responses based on the user's travel data. Follow these guidelines:
1. Keep responses under 2-3 sentences when possible
2. Be warm and personable, but prioritize factual information
3. Directly address the user's question without unnecessary preamble
4. Use natural, conversational language while maintaining professionalism
5. Highlight key information like dates, locations, and requirements when relevant"""


def get_search_format_prompt(search_results: str, original_query: str, today: date) -> str:
    """
    Prompt that rewrites raw web-search output in the app's voice.

    Args:
        search_results: Text returned by the search-augmented model
        original_query: The user's question
        today: Date the reply is relative to
    """
    return f"""The user asked: "{original_query}"

Today's date is {format_prompt_date(today)}.

Here is information found from a web search:

{search_results}

Please reformat this information into a friendly, conversational response that:
1. Addresses the user's query directly
2. Is warm and personable like a travel assistant
3. Keeps the tone consistent with the Soar app
4. Is concise (3-4 sentences when possible)
5. Highlights the most relevant facts for a traveler"""
