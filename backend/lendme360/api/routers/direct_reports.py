from typing import List

from fastapi import APIRouter, Depends

from ...services.cycle_service import CycleService
from ...storage.models import DirectReport, FeedbackSubmission
from ..dependencies import get_cycle_service
from ..schemas import CompleteCycleBody, GenerateReportResponse, SubmissionBody

router = APIRouter(prefix="/direct-reports", tags=["direct-reports"])


@router.get("", response_model=List[DirectReport])
async def list_direct_reports(cycle_service: CycleService = Depends(get_cycle_service)):
    return await cycle_service.get_all_direct_reports()


@router.get("/{report_id}", response_model=DirectReport)
async def get_direct_report(report_id: str, cycle_service: CycleService = Depends(get_cycle_service)):
    return await cycle_service.get_direct_report(report_id)


@router.post("/{report_id}/submissions", response_model=FeedbackSubmission, status_code=201)
async def add_submission(
    report_id: str,
    body: SubmissionBody,
    cycle_service: CycleService = Depends(get_cycle_service),
):
    return await cycle_service.add_submission(
        report_id,
        submitter_name=body.submitter_name,
        relationship=body.relationship,
        response=body.response,
        submitter_email=body.submitter_email,
    )


@router.post("/{report_id}/complete", response_model=DirectReport)
async def complete_cycle(
    report_id: str,
    body: CompleteCycleBody,
    cycle_service: CycleService = Depends(get_cycle_service),
):
    """Completes the feedback cycle. The manager must confirm explicitly."""
    return await cycle_service.complete_cycle(report_id, notes=body.notes, confirm=body.confirm)


@router.post("/{report_id}/report", response_model=GenerateReportResponse)
async def generate_direct_report_summary(report_id: str, cycle_service: CycleService = Depends(get_cycle_service)):
    report = await cycle_service.generate_report(report_id)
    return GenerateReportResponse(report=report)
