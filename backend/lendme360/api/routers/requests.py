from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ...exceptions import ValidationFailedError
from ...services.request_service import RequestService
from ...services.response_service import ResponseService
from ...storage.models import FeedbackDraft, FeedbackResponse, ReceivedRequest, RequestStatus, SentRequest
from ..dependencies import get_request_service, get_response_service
from ..schemas import DictationStartBody, DictationStatus, DictationStopResponse, SendRequestBody

router = APIRouter(prefix="/requests", tags=["requests"])


# --- Sent ---

@router.get("/sent", response_model=List[SentRequest])
async def list_sent_requests(request_service: RequestService = Depends(get_request_service)):
    return await request_service.list_sent_requests()


@router.post("/sent", response_model=SentRequest, status_code=201)
async def send_request(
    body: SendRequestBody,
    request_service: RequestService = Depends(get_request_service),
):
    errors = body.validation_errors()
    if errors:
        raise ValidationFailedError("Invalid feedback request", debug=errors, field=next(iter(errors)))
    return await request_service.send_request(
        name=body.name,
        email=body.email,
        relationship=body.relationship,
        collaboration_frequency=body.collaboration_frequency,
    )


@router.post("/sent/{request_id}/complete", response_model=SentRequest)
async def complete_sent_request(
    request_id: str,
    request_service: RequestService = Depends(get_request_service),
):
    return await request_service.complete_sent_request(request_id)


# --- Received ---

@router.get("/received", response_model=List[ReceivedRequest])
async def list_received_requests(
    status: Optional[RequestStatus] = None,
    request_service: RequestService = Depends(get_request_service),
):
    return await request_service.list_received_requests(status)


@router.get("/received/{request_id}", response_model=ReceivedRequest)
async def get_received_request(
    request_id: str,
    request_service: RequestService = Depends(get_request_service),
):
    return await request_service.get_received_request(request_id)


@router.get("/received/{request_id}/draft", response_model=FeedbackDraft)
async def get_draft(request_id: str, response_service: ResponseService = Depends(get_response_service)):
    return await response_service.get_draft(request_id)


@router.put("/received/{request_id}/draft", response_model=FeedbackDraft)
async def save_draft(
    request_id: str,
    body: FeedbackResponse,
    response_service: ResponseService = Depends(get_response_service),
):
    return await response_service.save_draft(request_id, body)


@router.post("/received/{request_id}/draft/enhance", response_model=FeedbackDraft)
async def enhance_draft(request_id: str, response_service: ResponseService = Depends(get_response_service)):
    return await response_service.enhance_draft(request_id)


@router.post("/received/{request_id}/draft/dictation/start", response_model=DictationStatus)
async def start_dictation(
    request_id: str,
    body: DictationStartBody,
    response_service: ResponseService = Depends(get_response_service),
):
    session = await response_service.start_dictation(request_id, body.field)
    return DictationStatus(
        active_field=session.active_field,
        is_recording=session.is_recording,
        is_transcribing=session.is_transcribing,
    )


@router.post("/received/{request_id}/draft/dictation/chunks", response_model=DictationStatus)
async def add_dictation_chunk(
    request_id: str,
    audio: UploadFile = File(...),
    response_service: ResponseService = Depends(get_response_service),
):
    session = await response_service.add_dictation_chunk(request_id, await audio.read())
    return DictationStatus(
        active_field=session.active_field,
        is_recording=session.is_recording,
        is_transcribing=session.is_transcribing,
    )


@router.post("/received/{request_id}/draft/dictation/stop", response_model=DictationStopResponse)
async def stop_dictation(request_id: str, response_service: ResponseService = Depends(get_response_service)):
    field, text, draft = await response_service.stop_dictation(request_id)
    return DictationStopResponse(field=field, text=text, draft=draft)


@router.post("/received/{request_id}/response", response_model=ReceivedRequest)
async def submit_response(
    request_id: str,
    body: FeedbackResponse,
    response_service: ResponseService = Depends(get_response_service),
):
    return await response_service.submit(request_id, body)
