"""
Chat Service - turns one user message into one reply.

This service orchestrates the chat flow:
1. Classify the message (QUERY / STATEMENT / WEB_SEARCH)
2. QUERY:      search the user's memories, answer from the top three
3. STATEMENT:  acknowledge, and store the statement as a memory in the background
4. WEB_SEARCH: search-augmented answer, reformatted in the app's tone

handle() never raises. Every failure along the way degrades to a
conversational fallback sentence; raw errors only reach the logs.
"""
from typing import Optional

from soar.core.exceptions import RemoteServiceError
from soar.core.logging_config import get_logger
from soar.llm.client import LLMClient, MessageType, get_llm_client
from soar.memory.client import MemoryStoreClient, get_memory_client
from soar.memory.formatting import build_fallback_response, select_top_memories
from soar.services.background import BackgroundTaskRunner, get_background_runner

logger = get_logger(__name__)

NO_INFORMATION_RESPONSE = (
    "I don't have specific information about that. "
    "Could you ask something about your trips or flights?"
)
MEMORY_UNAVAILABLE_RESPONSE = (
    "I'm having trouble accessing your travel information right now. "
    "Please try again later."
)
DEFAULT_ACKNOWLEDGMENT = "Thanks for sharing that information!"
WEB_SEARCH_FAILURE_RESPONSE = (
    "I'm having trouble searching for that information right now. "
    "Please try again later."
)
UNEXPECTED_ERROR_RESPONSE = "Sorry, something went wrong on my side. Please try again."


class ChatService:
    """
    Service for handling chat messages against the user's travel memory.

    Example:
        >>> service = ChatService()
        >>> service.handle("When is my flight to Tokyo?", user_id="u1")
        "Your flight NH106 to Tokyo departs on October 30, 2026 at 11:05 AM."
        >>> service.handle("My passport number is 123456", user_id="u1")
        "Got it, I've saved your passport number!"
    """

    def __init__(
        self,
        memory_client: Optional[MemoryStoreClient] = None,
        llm_client: Optional[LLMClient] = None,
        background: Optional[BackgroundTaskRunner] = None,
    ):
        """
        Initialize the chat service.

        Args:
            memory_client: Memory store client (shared instance if omitted)
            llm_client: LLM client (shared instance if omitted)
            background: Runner for statement writes (global runner if omitted)
        """
        self.memory_client = memory_client or get_memory_client()
        self.llm_client = llm_client or get_llm_client()
        self.background = background or get_background_runner()
        self._is_processing = False
        logger.info("ChatService initialized")

    @property
    def is_processing(self) -> bool:
        """True while handle() is running. UI spinner state, not a lock."""
        return self._is_processing

    def handle(self, message: str, user_id: str) -> str:
        """
        Produce the reply to one user message.

        Args:
            message: The user's text
            user_id: Owner of the memories read or written

        Returns:
            A non-empty reply string
        """
        self._is_processing = True
        logger.info(f"Handling message: user={user_id}, message_length={len(message)}")

        try:
            message_type = self._classify(message)

            if message_type is MessageType.STATEMENT:
                return self.handle_statement(message, user_id)
            if message_type is MessageType.WEB_SEARCH:
                return self.handle_web_search(message)
            return self.handle_query(message, user_id)

        except Exception as e:
            logger.exception(f"Unexpected error in chat service: {e}")
            return UNEXPECTED_ERROR_RESPONSE

        finally:
            self._is_processing = False

    def handle_query(self, query: str, user_id: str) -> str:
        """Answer a question from the user's stored memories."""
        try:
            memories = self.memory_client.search(query, user_id)
        except RemoteServiceError as e:
            logger.error(f"Memory search failed for user={user_id}: {e}")
            return MEMORY_UNAVAILABLE_RESPONSE

        if not memories:
            logger.info(f"No memories found for user={user_id}")
            return NO_INFORMATION_RESPONSE

        top_memories = select_top_memories(memories)
        logger.debug(
            f"Using {len(top_memories)} of {len(memories)} memories, "
            f"scores={[m.relevance_score for m in top_memories]}"
        )

        try:
            reply = self.llm_client.generate_response(query, top_memories)
        except RemoteServiceError as e:
            logger.error(f"Response generation failed, using memory fallback: {e}")
            return build_fallback_response(top_memories)

        return reply.strip() or build_fallback_response(top_memories)

    def handle_statement(self, statement: str, user_id: str) -> str:
        """
        Acknowledge a statement and store it as a memory.

        The memory write runs in the background; its outcome never
        changes or delays the acknowledgment.
        """
        try:
            self.background.submit(
                f"store-statement user={user_id}",
                self.memory_client.add,
                statement,
                user_id,
            )
        except RuntimeError as e:
            # Runner already shut down (app stopping)
            logger.error(f"Could not schedule statement write for user={user_id}: {e}")

        try:
            acknowledgment = self.llm_client.generate_acknowledgment(statement)
        except RemoteServiceError as e:
            logger.warning(f"Acknowledgment generation failed, using default: {e}")
            return DEFAULT_ACKNOWLEDGMENT

        return acknowledgment.strip() or DEFAULT_ACKNOWLEDGMENT

    def handle_web_search(self, query: str) -> str:
        """Answer from a web search, reformatted in the app's tone."""
        try:
            reply = self.llm_client.search_and_reformat(query)
        except RemoteServiceError as e:
            logger.error(f"Web search failed: {e}")
            return WEB_SEARCH_FAILURE_RESPONSE

        return reply.strip() or WEB_SEARCH_FAILURE_RESPONSE

    def _classify(self, message: str) -> MessageType:
        try:
            return self.llm_client.classify(message)
        except RemoteServiceError as e:
            # Fail open: a query is the most general way to handle any message
            logger.warning(f"Classification failed, treating as query: {e}")
            return MessageType.QUERY


# Module-level instance (singleton pattern)
_chat_service: ChatService | None = None


def get_chat_service() -> ChatService:
    """Get or create the chat service singleton."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService()
    return _chat_service


def reset_chat_service() -> None:
    """Reset the chat service singleton (useful for testing)."""
    global _chat_service
    _chat_service = None
