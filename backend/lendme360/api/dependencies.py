from fastapi import Request

from ..services.cycle_service import CycleService
from ..services.enhancement_service import EnhancementService
from ..services.report_service import ReportService
from ..services.request_service import RequestService
from ..services.response_service import ResponseService
from ..services.transcription_service import TranscriptionService

# Services are created once in `create_app` and kept on `app.state`.


def get_request_service(request: Request) -> RequestService:
    return request.app.state.request_service


def get_response_service(request: Request) -> ResponseService:
    return request.app.state.response_service


def get_cycle_service(request: Request) -> CycleService:
    return request.app.state.cycle_service


def get_enhancement_service(request: Request) -> EnhancementService:
    return request.app.state.enhancement_service


def get_report_service(request: Request) -> ReportService:
    return request.app.state.report_service


def get_transcription_service(request: Request) -> TranscriptionService:
    return request.app.state.transcription_service
