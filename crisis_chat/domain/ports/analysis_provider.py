"""Protocol for analysis backends."""

from typing import Protocol

from ..models.analysis import AnalysisResult


class AnalysisProvider(Protocol):
    """Protocol defining the interface for analysis providers."""

    async def initialize(self) -> None:
        """Open connections to the backend."""
        ...

    async def shutdown(self) -> None:
        """Clean up resources."""
        ...

    async def send(self, user_input: str) -> AnalysisResult:
        """Analyze user text and return a normalized analysis record."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def endpoint(self) -> str:
        """Full URL of the backend endpoint."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        ...
