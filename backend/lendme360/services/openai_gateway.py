import logging
from typing import Any, Dict, List, Optional

import openai
from openai.types.chat import ChatCompletion
from tenacity import retry, retry_if_exception_type, wait_exponential

from ..config import OpenAISettings
from ..exceptions import ConfigurationMissingError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)

# Attempts are bounded per gateway by OPENAI_MAX_ATTEMPTS; the default of 1
# makes every user action a single upstream call.
retry_strategy = retry(
    stop=lambda retry_state: retry_state.attempt_number >= retry_state.args[0].max_attempts,
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(TRANSIENT_ERRORS),
    reraise=True,
    before_sleep=lambda retry_state: logger.warning(
        f"Retrying OpenAI call due to {retry_state.outcome.exception()} "
        f"(attempt {retry_state.attempt_number})"
    ),
)


class OpenAIGateway:
    """
    Thin wrapper around the async OpenAI client.

    The client is created on first use so that a missing API key is reported
    per request instead of preventing the application from starting.
    """

    def __init__(self, config: OpenAISettings, client: Optional[openai.AsyncOpenAI] = None):
        self._config = config
        self._client = client

    @property
    def max_attempts(self) -> int:
        return self._config.MAX_ATTEMPTS

    @property
    def model(self) -> str:
        return self._config.MODEL

    def ensure_configured(self) -> None:
        if self._client is None and not self._config.API_KEY:
            raise ConfigurationMissingError("OpenAI API key not configured")

    @property
    def client(self) -> openai.AsyncOpenAI:
        self.ensure_configured()
        if self._client is None:
            kwargs: Dict[str, Any] = {}
            if self._config.TIMEOUT_SECONDS is not None:
                kwargs["timeout"] = self._config.TIMEOUT_SECONDS
            self._client = openai.AsyncOpenAI(
                api_key=self._config.API_KEY,
                base_url=self._config.API_BASE,
                **kwargs,
            )
        return self._client

    @retry_strategy
    async def create_chat_completion(
        self,
        messages: List[Dict[str, str]],
        max_completion_tokens: int,
        temperature: float = 1,
    ) -> ChatCompletion:
        return await self.client.chat.completions.create(
            model=self._config.MODEL,
            messages=messages,
            max_completion_tokens=max_completion_tokens,
            temperature=temperature,
        )

    @retry_strategy
    async def create_transcription(self, audio: bytes, filename: str, content_type: str) -> str:
        transcription = await self.client.audio.transcriptions.create(
            model=self._config.TRANSCRIPTION_MODEL,
            file=(filename, audio, content_type),
        )
        return transcription.text
