"""Domain models for the analyze-and-respond exchange."""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator


class Urgency(str, Enum):
    """Urgency levels reported by the analysis backend."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class AnalysisRequest(BaseModel):
    """Body sent to the analysis backend."""

    user_input: str = Field(..., description="Free-form text typed by the user")


class AnalysisSource(BaseModel):
    """A source consulted by the backend while verifying the input."""

    title: str = Field(default="", description="Title of the source document")
    url: str = Field(default="", description="Link to the source document")
    source: str = Field(default="", description="Publisher or outlet name")
    snippet: str = Field(default="", description="Relevant excerpt from the source")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("*", mode="before")
    @classmethod
    def text_or_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)


# Fields handed to the caller as the backend sent them
PASS_THROUGH_FIELDS = (
    "user_input",
    "bot_response",
    "verification_confidence",
    "official_sources_count",
    "language",
    "language_full",
    "urgency",
    "sentiment",
    "emotion",
    "emotion_confidence",
)


class AnalysisResult(BaseModel):
    """Normalized analysis record returned by the backend.

    Only ``is_verified`` and ``sources`` are normalized: the flag is always a
    real boolean and the sources are always a list. Every other field keeps
    the backend's value; a missing or null one takes the empty-analysis
    default, and a value of an unexpected type is kept as sent.
    """

    user_input: str = Field(default="", description="Input echoed back by the backend")
    bot_response: str = Field(default="", description="Conversational reply text")
    is_verified: bool = Field(default=False, description="Whether the claim was verified")
    verification_confidence: float = Field(default=0.0, description="Verification confidence (0-1)")
    official_sources_count: Union[int, float] = Field(default=0, description="Number of official sources found")
    sources: List[AnalysisSource] = Field(
        default_factory=list,
        description="Sources in relevance order",
    )
    language: str = Field(default="en", description="Detected language code")
    language_full: str = Field(default="English", description="Detected language name")
    urgency: str = Field(default=Urgency.LOW.value, description="High, Medium or Low")
    sentiment: str = Field(default="neutral", description="Sentiment label, case-insensitive")
    emotion: str = Field(default="neutral", description="Dominant emotion label")
    emotion_confidence: float = Field(default=0.0, description="Emotion confidence (0-1)")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        extra = "allow"
        json_schema_extra = {
            "example": {
                "user_input": "Is there a flood in Mumbai?",
                "bot_response": "Yes, confirmed.",
                "is_verified": True,
                "verification_confidence": 0.92,
                "official_sources_count": 2,
                "sources": [
                    {"title": "X", "url": "https://x", "source": "NDMA", "snippet": "..."}
                ],
                "language": "en",
                "language_full": "English",
                "urgency": "High",
                "sentiment": "Negative",
                "emotion": "Fear",
                "emotion_confidence": 0.8,
            }
        }

    @field_validator("is_verified", mode="before")
    @classmethod
    def coerce_verified_flag(cls, value: Any) -> bool:
        """Backend may send the flag as the string "true"/"false"."""
        if isinstance(value, str):
            return value.lower() == "true"
        return bool(value)

    @field_validator("sources", mode="before")
    @classmethod
    def default_sources(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return []
        return [item for item in value if isinstance(item, (dict, AnalysisSource))]

    @field_validator(*PASS_THROUGH_FIELDS, mode="wrap")
    @classmethod
    def pass_through(cls, value: Any, handler, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default()
        try:
            return handler(value)
        except ValidationError:
            return value

    @property
    def urgency_level(self) -> Optional[Urgency]:
        """Urgency as an enum member, or None for unexpected labels."""
        for level in Urgency:
            if level.value.lower() == str(self.urgency).strip().lower():
                return level
        return None
