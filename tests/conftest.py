"""Shared test fixtures for VoiceDraft."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from voicedraft.config import Config, GeminiConfig, RetryConfig, UploadConfig
from voicedraft.generation.types import ProviderResponse
from voicedraft.interfaces import AbstractGenerationProvider
from voicedraft.services.drafting_service import DraftingService


@pytest.fixture
def test_config():
    """Test config with no auth, short timeout and a 4MB upload limit."""
    return Config(
        api_token=None,
        locale="en",
        gemini=GeminiConfig(api_key="test-key"),
        retry=RetryConfig(policy="exponential", max_attempts=3),
        upload=UploadConfig(max_audio_bytes=4 * 1024 * 1024, request_timeout=30),
    )


@pytest.fixture
def provider():
    """Provider double; set `generate.return_value` or `side_effect` per test."""
    mock = AsyncMock(spec=AbstractGenerationProvider)
    mock.is_configured = MagicMock(return_value=True)
    mock.generate.return_value = ProviderResponse(
        text="Dear team,\nplease find the report attached.",
        input_tokens=1000,
        output_tokens=500,
    )
    return mock


@pytest.fixture
def observability():
    return MagicMock()


@pytest.fixture
def drafting_service(test_config, provider, observability):
    return DraftingService(test_config, provider, observability)


@pytest.fixture
def no_sleep(monkeypatch):
    """Skip backoff delays; returns the mock so tests can inspect the delays."""
    sleep = AsyncMock()
    monkeypatch.setattr("voicedraft.generation.orchestrator.asyncio.sleep", sleep)
    return sleep


@pytest.fixture
def test_app(test_config, drafting_service):
    """FastAPI app wired with the test config and a mocked provider."""
    from voicedraft.main import app

    app.state.config = test_config
    app.state.drafting_service = drafting_service
    return app


@pytest.fixture
async def client(test_app):
    """Async HTTP client for testing routes."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
