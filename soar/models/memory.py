"""
Memory record model - one stored fact returned by the memory store.

The store's JSON uses its own field names (memory, user_id, score);
aliases map them onto the names used in the rest of the code.
"""
from datetime import datetime
from typing import Any, Dict, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MemoryRecord(BaseModel):
    """
    A natural-language fact scoped to one user.

    relevance_score is only populated on search results.

    Example:
        >>> MemoryRecord.model_validate({
        ...     "id": "m1", "memory": "Trip to Tokyo", "user_id": "u1",
        ...     "created_at": "2025-01-01T00:00:00Z",
        ...     "updated_at": "2025-01-01T00:00:00Z", "score": 0.8,
        ... }).relevance_score
        0.8
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str
    text: str = Field(..., alias="memory")
    owner_user_id: str = Field(..., alias="user_id")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    categories: Set[str] = Field(default_factory=set)
    immutable: Optional[bool] = None
    created_at: datetime
    updated_at: datetime
    expiration_date: Optional[datetime] = None
    relevance_score: Optional[float] = Field(default=None, alias="score")

    @field_validator("metadata", "categories", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info) -> Any:
        # The store sends null rather than omitting the key
        if value is None:
            return {} if info.field_name == "metadata" else set()
        return value

    @property
    def score_or_zero(self) -> float:
        """Score used for ranking; records without a score rank as 0."""
        return self.relevance_score if self.relevance_score is not None else 0.0
