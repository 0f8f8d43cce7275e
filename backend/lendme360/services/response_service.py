import logging
from typing import Dict, Optional

from ..exceptions import InvalidTransitionError, ValidationFailedError
from ..storage.memory_storage import InMemoryStorageService
from ..storage.models import FeedbackDraft, FeedbackResponse, FieldName, ReceivedRequest
from .enhancement_service import EnhancementService
from .request_service import RequestService
from .transcription_service import DictationSession, TranscriptionService, apply_transcript

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "start_doing": "startDoing",
    "stop_doing": "stopDoing",
    "continue_doing": "continueDoing",
}


class ResponseService:
    """
    Collects a requestee's answers for a received request.

    Answers live in a draft until they are submitted. A draft can be edited
    directly, rewritten by the enhancement gateway, or extended by dictation.
    """

    def __init__(
        self,
        storage: InMemoryStorageService,
        request_service: RequestService,
        enhancement_service: EnhancementService,
        transcription_service: TranscriptionService,
    ):
        self._storage = storage
        self._requests = request_service
        self._enhancement = enhancement_service
        self._transcription = transcription_service
        self._dictation_sessions: Dict[str, DictationSession] = {}

    async def _get_pending_request(self, request_id: str) -> ReceivedRequest:
        request = await self._requests.get_received_request(request_id)
        if request.status != "Pending":
            raise InvalidTransitionError(f"Request {request_id} is read-only (status: {request.status})")
        return request

    async def get_draft(self, request_id: str) -> FeedbackDraft:
        await self._get_pending_request(request_id)
        draft = await self._storage.get_model(f"draft:{request_id}", FeedbackDraft)
        return draft or FeedbackDraft(request_id=request_id)

    async def save_draft(self, request_id: str, response: FeedbackResponse) -> FeedbackDraft:
        await self._get_pending_request(request_id)
        draft = FeedbackDraft(request_id=request_id, response=response)
        await self._storage.set_model(f"draft:{request_id}", draft)
        return draft

    async def enhance_draft(self, request_id: str) -> FeedbackDraft:
        draft = await self.get_draft(request_id)
        if draft.response.is_blank():
            raise ValidationFailedError("Please add some feedback before enhancing")
        enhanced = await self._enhancement.enhance(draft.response)
        logger.info(f"Enhanced draft for request {request_id}.")
        return await self.save_draft(request_id, enhanced)

    def get_dictation_session(self, request_id: str) -> DictationSession:
        if request_id not in self._dictation_sessions:
            self._dictation_sessions[request_id] = DictationSession(self._transcription)
        return self._dictation_sessions[request_id]

    async def start_dictation(self, request_id: str, field: FieldName) -> DictationSession:
        await self._get_pending_request(request_id)
        session = self.get_dictation_session(request_id)
        session.start(field)
        return session

    async def add_dictation_chunk(self, request_id: str, data: bytes) -> DictationSession:
        await self._get_pending_request(request_id)
        session = self.get_dictation_session(request_id)
        session.add_chunk(data)
        return session

    async def stop_dictation(self, request_id: str) -> tuple[Optional[FieldName], Optional[str], FeedbackDraft]:
        """Transcribes the buffered audio and appends it to the recording field of the draft."""
        await self._get_pending_request(request_id)
        session = self.get_dictation_session(request_id)
        field, text = await session.finish()
        # Edits saved while the audio was being transcribed are kept
        draft = await self.get_draft(request_id)
        if field is not None and text:
            draft = await self.save_draft(request_id, apply_transcript(draft.response, field, text))
        return field, text, draft

    async def submit(self, request_id: str, response: FeedbackResponse) -> ReceivedRequest:
        """Validates and submits the response, then discards the draft."""
        response = response.stripped()
        missing = [alias for name, alias in REQUIRED_FIELDS.items() if not getattr(response, name)]
        if missing:
            raise ValidationFailedError(
                "This field is required", debug={"missingFields": missing}, field=missing[0]
            )

        request = await self._requests.submit_response(request_id, response)
        await self._storage.delete_key(f"draft:{request_id}")
        self._dictation_sessions.pop(request_id, None)
        return request
