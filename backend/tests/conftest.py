"""
Pytest configuration and fixtures for backend tests.
"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from lendme360.api.app import create_app
from lendme360.config import OpenAISettings, Settings
from lendme360.services.openai_gateway import OpenAIGateway
from lendme360.storage.memory_storage import InMemoryStorageService
from lendme360.storage.seed import seed_demo_data


def make_completion(content=None, refusal=None, finish_reason="stop"):
    """Chat completion shaped like the OpenAI SDK response."""
    message = SimpleNamespace(role="assistant", content=content, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message, finish_reason=finish_reason)])


def make_connection_error():
    return openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )


@pytest.fixture
def mock_openai_client():
    """Async OpenAI client whose completion and transcription calls are mocks."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=make_completion("Improved feedback."))
    client.audio.transcriptions.create = AsyncMock(return_value=SimpleNamespace(text="dictated words"))
    return client


@pytest.fixture
def test_settings():
    return Settings(
        SEED_DEMO_DATA=True,
        MIN_SUBMISSIONS_TO_COMPLETE=0,
        openai=OpenAISettings(API_KEY="test-key", MAX_ATTEMPTS=1),
    )


@pytest.fixture
def gateway(test_settings, mock_openai_client):
    return OpenAIGateway(config=test_settings.openai, client=mock_openai_client)


@pytest.fixture
def unconfigured_gateway():
    return OpenAIGateway(config=OpenAISettings(API_KEY=None))


@pytest_asyncio.fixture
async def storage():
    storage = InMemoryStorageService()
    await seed_demo_data(storage)
    return storage


@pytest.fixture
def client(test_settings, mock_openai_client):
    """Test client over a freshly seeded application."""
    app = create_app(test_settings, openai_client=mock_openai_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client():
    """Test client with no OpenAI credential configured."""
    settings = Settings(SEED_DEMO_DATA=True, openai=OpenAISettings(API_KEY=None))
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
