"""
Input Validators - Sanitization and validation at the HTTP boundary.

This module provides:
- Message sanitization
- User ID validation
"""
import re
from typing import Optional, Tuple

from soar.core.logging_config import get_logger

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 2000
MAX_USER_ID_LENGTH = 128

# Auth-provider UIDs: letters, digits and a few separators
_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.:@\-]+$")


def sanitize_message(message: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Sanitize a user message.

    - Removes null bytes
    - Strips leading/trailing whitespace
    - Collapses runs of whitespace
    - Limits length

    Args:
        message: Raw user message
        max_length: Maximum allowed length

    Returns:
        Sanitized message
    """
    if not message:
        return ""

    cleaned = message.replace("\x00", "").strip()
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned[:max_length]


def validate_message(message: str) -> Tuple[bool, str, Optional[str]]:
    """
    Full validation and sanitization of a chat message.

    Returns:
        Tuple of (is_valid, sanitized_message, error_message)
    """
    if not message or not message.strip():
        return False, "", "Message cannot be empty"

    if len(message.strip()) > MAX_MESSAGE_LENGTH:
        return False, "", f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"

    sanitized = sanitize_message(message)
    if not sanitized:
        return False, "", "Message cannot be empty after sanitization"

    return True, sanitized, None


def validate_user_id(user_id: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a user ID handed over by the auth layer.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not user_id or not user_id.strip():
        return False, "user_id cannot be empty"

    if len(user_id) > MAX_USER_ID_LENGTH:
        return False, f"user_id too long (max {MAX_USER_ID_LENGTH} characters)"

    if not _USER_ID_PATTERN.match(user_id):
        logger.warning(f"Rejected malformed user_id: {user_id[:32]!r}")
        return False, "user_id contains invalid characters"

    return True, None
