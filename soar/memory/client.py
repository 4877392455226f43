"""
Memory Store Client - add and search user-scoped memories.

Wraps the two remote operations the app uses:
- add:    POST {base}/memories/                 (write one memory)
- search: POST {base}/memories/search/?version=v2 (ranked lookup)

Every call is one best-effort round trip: no caching, no retries.
"""
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from soar.core.config import get_settings
from soar.core.exceptions import DecodeFailure
from soar.core.http import decode_json, post_json
from soar.core.logging_config import get_logger
from soar.models.memory import MemoryRecord

logger = get_logger(__name__)

SERVICE_NAME = "memory-store"
CONTENT_TYPE = "travel_info"
OUTPUT_FORMAT = "v1.1"
API_VERSION = "v2"

_records_adapter = TypeAdapter(List[MemoryRecord])


class MemoryStoreClient:
    """
    Client for the remote memory store.

    Example:
        >>> client = MemoryStoreClient()
        >>> client.add("My passport number is 123456", user_id="u1")
        True
        >>> records = client.search("passport", user_id="u1")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        app_identifier: Optional[str] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Store token. Read from MEMORY_API_KEY when omitted.
            base_url: API base ending in /v1. Read from settings when omitted.
            session: requests.Session to reuse (a new one by default)
            timeout: Per-request timeout in seconds
            app_identifier: Value written to metadata.app
        """
        if api_key is None or base_url is None or timeout is None or app_identifier is None:
            settings = get_settings()
            api_key = api_key or settings.memory_api_key
            base_url = base_url or settings.memory_base_url
            timeout = timeout if timeout is not None else settings.http_timeout_seconds
            app_identifier = app_identifier or settings.app_name

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.app_identifier = app_identifier
        self.session = session or requests.Session()
        self._headers = {
            "Authorization": f"Token {api_key}",
            "Content-Type": "application/json",
        }

        logger.info(f"MemoryStoreClient initialized: base_url={self.base_url}")

    def add(self, text: str, user_id: str) -> bool:
        """
        Store one memory for a user.

        The payload is a two-turn exchange: the user's text and a canned
        acknowledgment, which is the shape the store extracts facts from.

        Returns:
            True once the store accepted the write

        Raises:
            RemoteServiceError: on any request, transport, or status failure
        """
        payload = {
            "messages": [
                {"role": "user", "content": text},
                {"role": "assistant", "content": f"I've noted the following information: {text}"},
            ],
            "user_id": user_id,
            "output_format": OUTPUT_FORMAT,
            "metadata": {
                "content_type": CONTENT_TYPE,
                "app": self.app_identifier,
            },
            "version": API_VERSION,
        }

        post_json(
            self.session,
            f"{self.base_url}/memories/",
            payload,
            self._headers,
            self.timeout,
            SERVICE_NAME,
        )
        logger.info(f"Stored memory: user={user_id}, length={len(text)}")
        return True

    def search(self, query: str, user_id: str) -> List[MemoryRecord]:
        """
        Search a user's memories.

        Returns:
            Records as returned by the store (unsorted), possibly empty

        Raises:
            RemoteServiceError: on any failure; DecodeFailure when the body
                is not a JSON array of memory objects
        """
        response = post_json(
            self.session,
            f"{self.base_url}/memories/search/?version={API_VERSION}",
            {"query": query, "user_id": user_id},
            self._headers,
            self.timeout,
            SERVICE_NAME,
        )
        data = decode_json(response, SERVICE_NAME)

        if not isinstance(data, list):
            logger.error(f"Memory search returned {type(data).__name__}, expected list. Raw response: {response.text[:1000]}")
            raise DecodeFailure("Memory search response is not a list", service=SERVICE_NAME, raw_body=response.text)

        try:
            records = _records_adapter.validate_python(data)
        except PydanticValidationError as e:
            logger.error(f"Memory search decode error: {e}. Raw response: {response.text[:1000]}")
            raise DecodeFailure(
                "Memory search response does not match schema",
                service=SERVICE_NAME,
                raw_body=response.text,
            ) from e

        # Never hand another user's memories to this user's conversation
        scoped = [r for r in records if r.owner_user_id == user_id]
        if len(scoped) != len(records):
            logger.warning(
                f"Dropped {len(records) - len(scoped)} search results not owned by user={user_id}"
            )

        logger.debug(f"Memory search: user={user_id}, results={len(scoped)}")
        return scoped


# Module-level instance (singleton pattern)
_memory_client: Optional[MemoryStoreClient] = None


def get_memory_client() -> MemoryStoreClient:
    """Get or create the shared MemoryStoreClient."""
    global _memory_client
    if _memory_client is None:
        _memory_client = MemoryStoreClient()
    return _memory_client


def reset_memory_client() -> None:
    """Forget the shared MemoryStoreClient (useful for testing)."""
    global _memory_client
    _memory_client = None
