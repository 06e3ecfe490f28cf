"""Test configuration and common fixtures."""

import json
from typing import Any, AsyncGenerator, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio

from crisis_chat.infrastructure.analysis.resilient_client import (
    AnalysisClientConfig,
    ResilientAnalysisClient,
)

BASE_URL = "http://test-analysis-server"


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    """Backend payload for a verified flood report."""
    return {
        "user_input": "Is there a flood in Mumbai?",
        "bot_response": "Yes, confirmed.",
        "is_verified": "true",
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


class ScriptedBackend:
    """Mock transport handler that replays a list of canned outcomes.

    Each entry is an ``httpx.Response`` to return or an exception to raise.
    The last entry repeats once the script runs out.
    """

    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.outcomes) - 1)
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


@pytest_asyncio.fixture
async def make_client() -> AsyncGenerator[Callable[..., ResilientAnalysisClient], None]:
    """Build clients whose HTTP traffic goes to a scripted backend."""
    created: List[ResilientAnalysisClient] = []

    def _make(backend: ScriptedBackend, **config) -> ResilientAnalysisClient:
        client = ResilientAnalysisClient(AnalysisClientConfig(base_url=BASE_URL, **config))
        client._client = httpx.AsyncClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(backend),
            headers={"Content-Type": "application/json"},
        )
        created.append(client)
        return client

    yield _make

    for client in created:
        await client.shutdown()


@pytest.fixture
def no_sleep(monkeypatch) -> List[float]:
    """Record backoff delays instead of waiting."""
    delays: List[float] = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(
        "crisis_chat.infrastructure.analysis.resilient_client.asyncio.sleep",
        fake_sleep,
    )
    return delays
