"""End-to-end tests against a stub analyze-and-respond backend."""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from crisis_chat.domain.exceptions import ExhaustedError
from crisis_chat.domain.services.analysis_report import verification_badge
from crisis_chat.domain.services.chat_service import ChatService
from crisis_chat.infrastructure.analysis.resilient_client import (
    AnalysisClientConfig,
    ResilientAnalysisClient,
)


class AnalyzeRequest(BaseModel):
    """Request body accepted by the stub backend."""

    user_input: str


def create_backend(failures_before_success: int) -> FastAPI:
    """Build a stub backend that fails a fixed number of times first."""
    app = FastAPI()
    app.state.calls = []

    @app.post("/analyze-and-respond")
    async def analyze_and_respond(request: AnalyzeRequest):
        app.state.calls.append(request.user_input)
        if len(app.state.calls) <= failures_before_success:
            raise HTTPException(status_code=503, detail="Model warming up")
        return {
            "user_input": request.user_input,
            "bot_response": "Flooding confirmed in low-lying areas.",
            "is_verified": "true",
            "verification_confidence": 0.92,
            "official_sources_count": 2,
            "sources": [
                {"title": "Flood alert", "url": "https://ndma.gov.in", "source": "NDMA", "snippet": "Red alert"},
                {"title": "City update", "url": "https://mcgm.gov.in", "source": "BMC", "snippet": "Schools shut"},
            ],
            "language": "en",
            "language_full": "English",
            "urgency": "High",
            "sentiment": "Negative",
            "emotion": "Fear",
            "emotion_confidence": 0.8,
        }

    return app


async def build_client(app: FastAPI) -> ResilientAnalysisClient:
    client = ResilientAnalysisClient(
        AnalysisClientConfig(base_url="http://testserver", initial_delay=0.01)
    )
    client._client = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
        headers={"Content-Type": "application/json"},
    )
    return client


@pytest_asyncio.fixture
async def flaky_backend():
    """Backend that recovers on the second attempt."""
    app = create_backend(failures_before_success=1)
    client = await build_client(app)
    yield app, client
    await client.shutdown()


@pytest_asyncio.fixture
async def dead_backend():
    """Backend that never recovers."""
    app = create_backend(failures_before_success=100)
    client = await build_client(app)
    yield app, client
    await client.shutdown()


@pytest.mark.asyncio
async def test_chat_recovers_from_transient_failure(flaky_backend):
    """Test a chat exchange that needs one retry."""
    app, client = flaky_backend
    chat = ChatService(client)

    reply = await chat.send_message("Is there a flood in Mumbai?")

    assert app.state.calls == ["Is there a flood in Mumbai?"] * 2
    assert reply.content == "Flooding confirmed in low-lying areas."
    assert reply.analysis.is_verified is True
    assert verification_badge(reply.analysis) == "Verified by 2 official sources"
    assert [source.source for source in reply.analysis.sources] == ["NDMA", "BMC"]


@pytest.mark.asyncio
async def test_chat_reports_unreachable_backend(dead_backend):
    """Test the chat transcript after every attempt fails."""
    app, client = dead_backend
    chat = ChatService(client)

    with pytest.raises(ExhaustedError) as exc_info:
        await chat.send_message("Is there a flood in Mumbai?")

    assert len(app.state.calls) == 3
    assert exc_info.value.last_error.detail == "Model warming up"
    assert chat.messages[-1].content == chat.fallback_message()

    # The user can simply try again
    with pytest.raises(ExhaustedError):
        await chat.send_message("Any update?")
    assert len(app.state.calls) == 6
