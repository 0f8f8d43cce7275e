import asyncio
import logging

import openai

from ..exceptions import UpstreamFailureError
from ..storage.models import RESPONSE_FIELDS, FeedbackResponse
from .openai_gateway import OpenAIGateway

logger = logging.getLogger(__name__)

ENHANCE_SYSTEM_PROMPT = (
    "You are a helpful assistant that improves workplace feedback. Never give long feedback. "
    "Keep it concise. Keep the same tone and intent, but make the feedback more constructive, "
    "specific, and actionable. Return only the improved text without any preamble or explanation."
)
ENHANCE_MAX_COMPLETION_TOKENS = 1000


class EnhancementService:
    def __init__(self, gateway: OpenAIGateway):
        self._gateway = gateway

    async def _enhance_field(self, content: str) -> str:
        """Rewrites one field. Blank fields are returned untouched without an API call."""
        if not content.strip():
            return content

        prompt = (
            f'You have been given these bullet points as feedback to give to another colleague "{content}", '
            f"improve this feedback with concise, useful details and comments. Don't make it too long."
        )
        completion = await self._gateway.create_chat_completion(
            messages=[
                {"role": "system", "content": ENHANCE_SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_completion_tokens=ENHANCE_MAX_COMPLETION_TOKENS,
        )
        if not completion.choices:
            return content
        enhanced = completion.choices[0].message.content
        return enhanced.strip() if enhanced and enhanced.strip() else content

    async def enhance(self, feedback: FeedbackResponse) -> FeedbackResponse:
        """
        Enhances all four fields concurrently.

        Either every field is returned or the whole call fails with
        `UpstreamFailureError`; partial results are never reported.
        """
        self._gateway.ensure_configured()
        try:
            results = await asyncio.gather(
                *(self._enhance_field(getattr(feedback, name)) for name in RESPONSE_FIELDS)
            )
        except openai.OpenAIError as e:
            logger.error(f"Enhancement error: {e}")
            raise UpstreamFailureError("Failed to enhance feedback") from e

        logger.info(f"Enhanced {sum(1 for name in RESPONSE_FIELDS if getattr(feedback, name).strip())} feedback fields.")
        return FeedbackResponse(**dict(zip(RESPONSE_FIELDS, results)))
