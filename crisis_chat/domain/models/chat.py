"""Domain models for the chat transcript."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .analysis import AnalysisResult


class ChatRole(str, Enum):
    """Author of a transcript entry."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """A single transcript entry."""

    role: ChatRole = Field(..., description="Who wrote the message")
    content: str = Field(..., description="Message text")
    analysis: Optional[AnalysisResult] = Field(
        None,
        description="Analysis attached to the message, if any",
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="When the message was added")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def is_user(self) -> bool:
        return self.role == ChatRole.USER

    @property
    def has_analysis(self) -> bool:
        """Welcome and greeting messages carry no analysis."""
        return self.analysis is not None
