from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ...exceptions import ValidationFailedError
from ...services.enhancement_service import EnhancementService
from ...services.report_service import ReportService
from ...services.transcription_service import RECORDING_CONTENT_TYPE, RECORDING_FILENAME, TranscriptionService
from ...storage.models import FeedbackResponse
from ..dependencies import get_enhancement_service, get_report_service, get_transcription_service
from ..schemas import EnhanceFeedbackRequest, GenerateReportRequest, GenerateReportResponse, TranscriptionResponse

router = APIRouter(tags=["ai"])


@router.post("/enhance-feedback", response_model=FeedbackResponse)
async def enhance_feedback(
    body: EnhanceFeedbackRequest,
    enhancement_service: EnhancementService = Depends(get_enhancement_service),
):
    """Rewrites the four feedback fields to be more constructive."""
    if body.feedback is None:
        raise ValidationFailedError("No feedback provided")
    return await enhancement_service.enhance(body.feedback)


@router.post("/generate-report", response_model=GenerateReportResponse)
async def generate_report(
    body: GenerateReportRequest,
    report_service: ReportService = Depends(get_report_service),
):
    report = await report_service.generate_report(
        body.employee_name, body.employee_role, body.feedback_submissions
    )
    return GenerateReportResponse(report=report)


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    audio: Optional[UploadFile] = File(None),
    transcription_service: TranscriptionService = Depends(get_transcription_service),
):
    if audio is None:
        raise ValidationFailedError("No audio file provided")
    data = await audio.read()
    text = await transcription_service.transcribe(
        data,
        filename=audio.filename or RECORDING_FILENAME,
        content_type=audio.content_type or RECORDING_CONTENT_TYPE,
    )
    return TranscriptionResponse(text=text)
