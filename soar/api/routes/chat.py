"""
Chat Routes - API endpoint for conversational interactions.

POST /chat answers one message for one user. The reply is always a
conversational sentence: service failures degrade to fallback text
inside ChatService and never surface as HTTP errors. Only invalid
input (400) and rate limiting (429) are reported as errors.
"""
from fastapi import APIRouter, Depends, Response

from soar.core.exceptions import RateLimitExceeded, ValidationError
from soar.core.logging_config import get_logger
from soar.core.rate_limiter import RateLimiter, get_rate_limiter
from soar.core.validators import validate_message, validate_user_id
from soar.models.chat import ChatRequest, ChatResponse, ErrorResponse
from soar.services.chat_service import ChatService, get_chat_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    }
)


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a message to the travel assistant",
    description="""
    The message is classified and handled as one of:

    - **query**: answered from the user's stored travel memories
      ("When is my flight to Tokyo?")
    - **statement**: acknowledged and remembered
      ("My passport number is 123456")
    - **web_search**: general travel question answered from the web
      ("Do I need a visa for Japan?")

    Requests are rate limited per user_id; see the X-RateLimit-Remaining header.
    """
)
def send_message(
    request: ChatRequest,
    response: Response,
    chat_service: ChatService = Depends(get_chat_service),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> ChatResponse:
    """Process a user message and return the assistant's reply."""
    is_valid, error = validate_user_id(request.user_id)
    if not is_valid:
        raise ValidationError(error, field="user_id")

    is_valid, _, error = validate_message(request.message)
    if not is_valid:
        raise ValidationError(error, field="message")

    is_allowed, remaining = rate_limiter.is_allowed(request.user_id)
    response.headers["X-RateLimit-Limit"] = str(rate_limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(remaining)
    if not is_allowed:
        raise RateLimitExceeded(retry_after=rate_limiter.retry_after_seconds(request.user_id))

    # Validated on the normalized text; handled with the user's own line breaks
    reply = chat_service.handle(request.message.replace("\x00", ""), request.user_id)
    return ChatResponse(message=reply, user_id=request.user_id)
