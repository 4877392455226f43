"""
LLM Client for the chat-completion API.

This module provides the four prompt-building operations the chat
pipeline needs, each a single POST to {base}/chat/completions:
- classify:                QUERY / STATEMENT / WEB_SEARCH
- generate_response:       memory-grounded, time-aware reply
- generate_acknowledgment: short reply to something the user shared
- web_search + reformat_search_results: search-augmented answer in app tone

Every operation uses a fixed model, temperature, and token budget.
Calls go through the OpenAI SDK with retries disabled; SDK errors are
mapped onto RemoteServiceError subclasses so callers handle one family.
"""
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

import openai
from openai import OpenAI

from soar.core.config import get_settings
from soar.core.exceptions import DecodeFailure, HTTPStatusFailure, TransportFailure
from soar.core.logging_config import get_logger
from soar.llm.prompts import (
    ACKNOWLEDGMENT_SYSTEM_PROMPT,
    ASSISTANT_SYSTEM_PROMPT,
    CLASSIFIER_SYSTEM_PROMPT,
    SEARCH_FORMAT_SYSTEM_PROMPT,
    get_acknowledgment_prompt,
    get_classification_prompt,
    get_response_user_prompt,
    get_search_format_prompt,
)
from soar.memory.formatting import TOP_MEMORY_LIMIT
from soar.models.memory import MemoryRecord

logger = get_logger(__name__)

SERVICE_NAME = "llm"

# Low temperature and a tiny budget: the classifier answers with one word
CLASSIFY_TEMPERATURE = 0.1
CLASSIFY_MAX_TOKENS = 10
GENERATE_TEMPERATURE = 0.7
RESPONSE_MAX_TOKENS = 500
ACKNOWLEDGMENT_MAX_TOKENS = 100


class MessageType(str, Enum):
    """Intent of a user message."""
    QUERY = "query"
    STATEMENT = "statement"
    WEB_SEARCH = "web_search"


def parse_classification(content: str) -> MessageType:
    """
    Map the classifier's reply onto a MessageType.

    WEB_SEARCH is checked before QUERY before STATEMENT; anything
    unrecognised is treated as a QUERY.
    """
    normalized = content.strip().upper()
    if "WEB_SEARCH" in normalized:
        return MessageType.WEB_SEARCH
    if "QUERY" in normalized:
        return MessageType.QUERY
    if "STATEMENT" in normalized:
        return MessageType.STATEMENT
    return MessageType.QUERY


class LLMClient:
    """
    Client for an OpenAI-compatible chat-completion API.

    Example:
        >>> client = LLMClient()
        >>> client.classify("My passport number is 123456")
        <MessageType.STATEMENT: 'statement'>
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[OpenAI] = None,
        timeout: Optional[float] = None,
        classifier_model: Optional[str] = None,
        chat_model: Optional[str] = None,
        search_model: Optional[str] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer key. Read from OPENAI_API_KEY when omitted.
            base_url: API base ending in /v1. Read from settings when omitted.
            client: Preconfigured OpenAI client (api_key/base_url/timeout ignored)
            timeout: Per-request timeout in seconds
            classifier_model / chat_model / search_model: model overrides
            today: Callable returning the date embedded in prompts
        """
        settings = get_settings()

        self.classifier_model = classifier_model or settings.llm_model_classifier
        self.chat_model = chat_model or settings.llm_model_chat
        self.search_model = search_model or settings.llm_model_search
        self._today = today or date.today

        # Retries off: every failure surfaces to the caller's fallback
        self.client = client or OpenAI(
            api_key=api_key or settings.openai_api_key,
            base_url=base_url or settings.llm_base_url,
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            max_retries=0,
        )

        logger.info(
            f"LLM client initialized: base_url={self.client.base_url}, "
            f"chat_model={self.chat_model}, classifier_model={self.classifier_model}"
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def classify(self, message: str) -> MessageType:
        """Classify a message as QUERY, STATEMENT or WEB_SEARCH."""
        content = self._chat(
            model=self.classifier_model,
            system_prompt=CLASSIFIER_SYSTEM_PROMPT,
            user_prompt=get_classification_prompt(message),
            temperature=CLASSIFY_TEMPERATURE,
            max_tokens=CLASSIFY_MAX_TOKENS,
        )
        message_type = parse_classification(content)
        logger.debug(f"Classified message as {message_type.value} (raw={content.strip()[:20]!r})")
        return message_type

    def generate_response(self, query: str, memories: Sequence[MemoryRecord]) -> str:
        """Answer a question from the user's memories (first three are used)."""
        return self._chat(
            model=self.chat_model,
            system_prompt=ASSISTANT_SYSTEM_PROMPT,
            user_prompt=get_response_user_prompt(query, list(memories)[:TOP_MEMORY_LIMIT], self._today()),
            temperature=GENERATE_TEMPERATURE,
            max_tokens=RESPONSE_MAX_TOKENS,
        )

    def generate_acknowledgment(self, statement: str) -> str:
        """Short friendly acknowledgment of a statement."""
        return self._chat(
            model=self.chat_model,
            system_prompt=ACKNOWLEDGMENT_SYSTEM_PROMPT,
            user_prompt=get_acknowledgment_prompt(statement),
            temperature=GENERATE_TEMPERATURE,
            max_tokens=ACKNOWLEDGMENT_MAX_TOKENS,
        )

    def web_search(self, query: str) -> str:
        """Raw answer from the search-augmented model."""
        return self._complete(
            model=self.search_model,
            messages=[{"role": "user", "content": query}],
            web_search_options={},
        )

    def reformat_search_results(self, raw_results: str, query: str) -> str:
        """Rewrite raw search output as a conversational, date-aware reply."""
        return self._chat(
            model=self.chat_model,
            system_prompt=SEARCH_FORMAT_SYSTEM_PROMPT,
            user_prompt=get_search_format_prompt(raw_results, query, self._today()),
            temperature=GENERATE_TEMPERATURE,
            max_tokens=RESPONSE_MAX_TOKENS,
        )

    def search_and_reformat(self, query: str) -> str:
        """Run web_search then reformat_search_results in sequence."""
        raw_results = self.web_search(query)
        logger.debug(f"Web search returned {len(raw_results)} chars")
        return self.reformat_search_results(raw_results, query)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _chat(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return self._complete(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    def _complete(self, model: str, **params: Any) -> str:
        """Create a chat completion and return choices[0].message.content."""
        try:
            response = self.client.chat.completions.create(model=model, **params)
        except openai.APIStatusError as e:
            body = e.response.text
            logger.warning(f"{SERVICE_NAME} returned HTTP {e.status_code} for {model}: {body[:200]}")
            raise HTTPStatusFailure(e.status_code, service=SERVICE_NAME, body=body) from e
        except openai.APIConnectionError as e:
            logger.warning(f"{SERVICE_NAME} transport error for {model}: {e}")
            raise TransportFailure(f"{SERVICE_NAME} request failed: {e}", service=SERVICE_NAME) from e
        except openai.APIResponseValidationError as e:
            raw = e.response.text
            logger.error(f"Unparseable completion from {model}: {raw[:1000]}")
            raise DecodeFailure("Completion response is not valid", service=SERVICE_NAME, raw_body=raw) from e

        if not response.choices or not isinstance(response.choices[0].message.content, str):
            raw = response.model_dump_json()
            logger.error(f"Completion from {model} has no text content: {raw[:1000]}")
            raise DecodeFailure(
                "Completion response has no choices[0].message.content",
                service=SERVICE_NAME,
                raw_body=raw,
            )

        return response.choices[0].message.content


# Module-level instance (singleton pattern)
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the shared LLMClient."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Forget the shared LLMClient (useful for testing)."""
    global _llm_client
    _llm_client = None
