from unittest.mock import AsyncMock, MagicMock

import openai
import pytest

from conftest import make_completion, make_connection_error
from lendme360.config import OpenAISettings
from lendme360.exceptions import ConfigurationMissingError
from lendme360.services.openai_gateway import OpenAIGateway


def test_client_requires_api_key():
    gateway = OpenAIGateway(config=OpenAISettings(API_KEY=None))

    with pytest.raises(ConfigurationMissingError):
        gateway.client


def test_client_is_built_lazily_from_settings():
    gateway = OpenAIGateway(config=OpenAISettings(API_KEY="sk-test", API_BASE="http://localhost:9999/v1"))

    client = gateway.client

    assert isinstance(client, openai.AsyncOpenAI)
    assert str(client.base_url).startswith("http://localhost:9999/v1")
    assert gateway.client is client


@pytest.mark.asyncio
async def test_transcription_uploads_single_payload(mock_openai_client):
    gateway = OpenAIGateway(config=OpenAISettings(API_KEY="sk-test"), client=mock_openai_client)

    text = await gateway.create_transcription(b"audio-bytes", "recording.webm", "audio/webm")

    assert text == "dictated words"
    kwargs = mock_openai_client.audio.transcriptions.create.await_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["file"] == ("recording.webm", b"audio-bytes", "audio/webm")


@pytest.mark.asyncio
async def test_single_attempt_by_default(mock_openai_client):
    mock_openai_client.chat.completions.create.side_effect = make_connection_error()
    gateway = OpenAIGateway(config=OpenAISettings(API_KEY="sk-test"), client=mock_openai_client)

    with pytest.raises(openai.APIConnectionError):
        await gateway.create_chat_completion(messages=[], max_completion_tokens=10)

    assert mock_openai_client.chat.completions.create.await_count == 1


@pytest.mark.asyncio
async def test_transient_errors_retry_when_enabled():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        side_effect=[make_connection_error(), make_completion("ok")]
    )
    gateway = OpenAIGateway(config=OpenAISettings(API_KEY="sk-test", MAX_ATTEMPTS=2), client=client)

    completion = await gateway.create_chat_completion(messages=[], max_completion_tokens=10)

    assert completion.choices[0].message.content == "ok"
    assert client.chat.completions.create.await_count == 2
