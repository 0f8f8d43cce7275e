import logging
from typing import List, Optional

import openai

from ..exceptions import FeedbackAppError, RecordingInProgressError, UpstreamFailureError, ValidationFailedError
from ..storage.models import FIELD_ALIASES, FeedbackResponse, FieldName
from .openai_gateway import OpenAIGateway

logger = logging.getLogger(__name__)

RECORDING_FILENAME = "recording.webm"
RECORDING_CONTENT_TYPE = "audio/webm"


def append_transcript(existing: str, text: str) -> str:
    """Appends dictated text to a field, separated by a single space."""
    return f"{existing} {text}" if existing else text


def apply_transcript(response: FeedbackResponse, field: FieldName, text: str) -> FeedbackResponse:
    attr = FIELD_ALIASES[field]
    return response.model_copy(update={attr: append_transcript(getattr(response, attr), text)})


class TranscriptionService:
    def __init__(self, gateway: OpenAIGateway):
        self._gateway = gateway

    async def transcribe(
        self,
        audio: bytes,
        filename: str = RECORDING_FILENAME,
        content_type: str = RECORDING_CONTENT_TYPE,
    ) -> str:
        """Uploads one audio payload and returns the transcribed text."""
        if not audio:
            raise ValidationFailedError("No audio file provided")

        self._gateway.ensure_configured()
        try:
            text = await self._gateway.create_transcription(audio, filename, content_type)
        except openai.OpenAIError as e:
            logger.error(f"Transcription error: {e}")
            raise UpstreamFailureError("Failed to transcribe audio") from e
        logger.info(f"Transcribed {len(audio)} bytes of audio into {len(text)} characters.")
        return text.strip()


class DictationSession:
    """
    Recording state for one response form.

    Only one field records at a time. Audio arrives in chunks and is
    uploaded as a single payload when the recording stops.
    """

    def __init__(self, transcription_service: TranscriptionService):
        self._transcription = transcription_service
        self.active_field: Optional[FieldName] = None
        self.is_transcribing = False
        self.error: Optional[str] = None
        self._chunks: List[bytes] = []

    @property
    def is_recording(self) -> bool:
        return self.active_field is not None and not self.is_transcribing

    def start(self, field: FieldName) -> None:
        if self.active_field is not None or self.is_transcribing:
            raise RecordingInProgressError(
                f"A recording is already in progress for {self.active_field}", field=self.active_field
            )
        self.active_field = field
        self.error = None
        self._chunks = []
        logger.info(f"Started recording for field {field}.")

    def add_chunk(self, data: bytes) -> None:
        if not self.is_recording:
            raise ValidationFailedError("No recording in progress")
        if data:
            self._chunks.append(data)

    def _reset(self) -> None:
        self.active_field = None
        self.is_transcribing = False
        self._chunks = []

    async def finish(self) -> tuple[Optional[FieldName], Optional[str]]:
        """
        Stops the recording and uploads the buffered audio once.

        Returns the recording field and the transcribed text, or (None, None)
        when nothing is recording. Recording state is reset whatever the
        outcome.
        """
        if self.is_transcribing:
            raise RecordingInProgressError(
                f"The recording for {self.active_field} is already being transcribed", field=self.active_field
            )
        field = self.active_field
        if field is None:
            return None, None

        self.is_transcribing = True
        audio = b"".join(self._chunks)
        try:
            text = await self._transcription.transcribe(audio)
        except FeedbackAppError as e:
            self.error = e.message
            e.field = field
            raise
        finally:
            self._reset()
        return field, text

    async def stop(self, draft: FeedbackResponse) -> tuple[Optional[FieldName], Optional[str], FeedbackResponse]:
        """Stops the recording and appends the transcribed text to its field of `draft`."""
        field, text = await self.finish()
        if field is None or not text:
            return field, text, draft
        return field, text, apply_transcript(draft, field, text)
