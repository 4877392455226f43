"""
Request and Response models for the Chat API.

These Pydantic models define the contract between client and server.
They provide:
- Type validation
- Automatic documentation
- Request/response serialization
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /chat endpoint.

    Attributes:
        message: The user's question or statement.
        user_id: Owner of the memories read or written for this message.
    """
    message: str = Field(
        ...,
        min_length=1,
        max_length=2000,
        description="The user's message or question",
        examples=["When is my flight to Tokyo?"]
    )
    user_id: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Authenticated user identifier"
    )


class ChatResponse(BaseModel):
    """Response model for the /chat endpoint."""
    message: str = Field(
        ...,
        description="The assistant's conversational reply"
    )
    user_id: str
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Response generation timestamp"
    )


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(default="healthy")
    version: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    ledger: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
