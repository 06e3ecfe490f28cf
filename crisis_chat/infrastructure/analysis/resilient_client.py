"""Retrying HTTP client for the analyze-and-respond backend."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.exceptions import (
    AnalysisClientError,
    ExhaustedError,
    ServerError,
    TransportError,
)
from ...domain.models.analysis import AnalysisRequest, AnalysisResult
from ...domain.ports.analysis_provider import AnalysisProvider

logger = logging.getLogger(__name__)


class AnalysisClientConfig(BaseModel):
    """Configuration for the resilient analysis client."""

    base_url: str = Field(default="http://localhost:8000", description="Backend base URL")
    endpoint_path: str = Field(default="/analyze-and-respond", description="Analysis endpoint path")
    max_attempts: int = Field(default=3, ge=1, description="Maximum number of attempts per call")
    initial_delay: float = Field(default=1.0, ge=0, description="Delay before the second attempt in seconds")
    backoff_multiplier: float = Field(default=2.0, ge=1, description="Growth factor between delays")
    timeout: float = Field(default=30.0, description="Per-attempt timeout in seconds")
    retry_client_errors: bool = Field(
        default=True,
        description="Retry 4xx responses like any other failure; False fails fast on them",
    )


class ResilientAnalysisClient(AnalysisProvider):
    """Analysis provider that retries failed calls with exponential backoff.

    Each call to :meth:`send` makes up to ``max_attempts`` sequential POST
    requests. Transport failures and non-success statuses are retried after
    ``initial_delay * backoff_multiplier ** attempt`` seconds. When every
    attempt fails, :class:`ExhaustedError` is raised with the last failure
    chained as its cause.
    """

    def __init__(
        self,
        config: Optional[AnalysisClientConfig] = None,
        provider_name: str = "Resilient",
    ):
        """Initialize the client.

        Args:
            config: Client configuration
            provider_name: Name of the provider
        """
        self._config = config or AnalysisClientConfig()
        self._name = provider_name
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
                headers={"Content-Type": "application/json"},
            )
        self._initialized = True
        logger.info(f"✅ Analysis client ready: {self.endpoint}")

    async def send(self, user_input: str) -> AnalysisResult:
        """Analyze user text, retrying transient failures.

        Args:
            user_input: Text typed by the user, already trimmed by the caller

        Returns:
            Normalized analysis record

        Raises:
            ExhaustedError: If every attempt failed
            ServerError: If a 4xx response arrived and client errors are not retried
            RuntimeError: If the client was not initialized
        """
        if not self._client:
            raise RuntimeError("Client not initialized")

        body = AnalysisRequest(user_input=user_input).model_dump()
        logger.debug(f"Body sent to API: {body}")

        max_attempts = self._config.max_attempts
        last_error: Optional[AnalysisClientError] = None

        for attempt in range(max_attempts):
            try:
                return await self._attempt(body)
            except ServerError as e:
                if e.is_client_error and not self._config.retry_client_errors:
                    logger.error(f"❌ Backend rejected input: {e}")
                    raise
                last_error = e
            except TransportError as e:
                last_error = e

            logger.warning(f"⚠️ Attempt {attempt + 1}/{max_attempts} failed: {last_error}")

            if attempt == max_attempts - 1:
                break

            delay = self._config.initial_delay * self._config.backoff_multiplier ** attempt
            logger.info(f"🔁 Retrying after {delay:.2f}s...")
            await asyncio.sleep(delay)

        logger.error(f"❌ Analysis backend unreachable after {max_attempts} attempts")
        raise ExhaustedError(max_attempts, last_error) from last_error

    async def _attempt(self, body: Dict[str, Any]) -> AnalysisResult:
        """Make a single request and turn every failure into a client error."""
        try:
            response = await self._client.post(self._config.endpoint_path, json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise ServerError(response.status_code, self._error_detail(response))

        try:
            payload = response.json()
        except ValueError as e:
            raise ServerError(None, "response body is not valid JSON") from e

        if not isinstance(payload, dict):
            raise ServerError(None, "response body is not a JSON object")

        # Field-level oddities pass through; only is_verified and sources are normalized
        return AnalysisResult.model_validate(payload)

    @staticmethod
    def _error_detail(response: httpx.Response) -> Optional[str]:
        """Pull ``detail`` out of an error body, if there is a usable one."""
        try:
            payload = response.json()
        except ValueError:
            return None
        if not isinstance(payload, dict):
            return None
        detail = payload.get("detail")
        if detail is None:
            return None
        return detail if isinstance(detail, str) else str(detail)

    async def shutdown(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def config(self) -> AnalysisClientConfig:
        return self._config

    @property
    def provider_name(self) -> str:
        """Get the name of the provider."""
        return self._name

    @property
    def endpoint(self) -> str:
        """Full URL of the analysis endpoint."""
        return self._config.base_url.rstrip("/") + self._config.endpoint_path

    @property
    def is_available(self) -> bool:
        """Check if the client is ready to send."""
        return self._initialized and self._client is not None
