import logging
import uuid
from typing import List

from ..exceptions import InvalidTransitionError, NotFoundError, ValidationFailedError
from ..storage.memory_storage import InMemoryStorageService
from ..storage.models import DirectReport, FeedbackResponse, FeedbackSubmission, Relationship, utc_today
from .report_service import ReportService

logger = logging.getLogger(__name__)


class CycleService:
    """Feedback cycles of the current manager's direct reports."""

    def __init__(
        self,
        storage: InMemoryStorageService,
        report_service: ReportService,
        min_submissions_to_complete: int = 0,
    ):
        self._storage = storage
        self._reports = report_service
        self._min_submissions = min_submissions_to_complete

    async def get_all_direct_reports(self) -> List[DirectReport]:
        return await self._storage.get_models("direct_report:*", DirectReport)

    async def get_direct_report(self, report_id: str) -> DirectReport:
        """Retrieves a direct report by its ID."""
        report = await self._storage.get_model(f"direct_report:{report_id}", DirectReport)
        if not report:
            logger.warning(f"Direct report with id {report_id} not found.")
            raise NotFoundError(f"Direct report {report_id} not found")
        return report

    async def add_submission(
        self,
        report_id: str,
        submitter_name: str,
        relationship: Relationship,
        response: FeedbackResponse,
        submitter_email: str | None = None,
    ) -> FeedbackSubmission:
        """Records a colleague's feedback in an ongoing cycle."""
        report = await self.get_direct_report(report_id)
        if report.is_completed:
            raise InvalidTransitionError(f"The feedback cycle for {report.name} is already completed")

        submission = FeedbackSubmission(
            id=f"fs-{uuid.uuid4().hex[:8]}",
            submitter_name=submitter_name.strip(),
            submitter_email=submitter_email,
            relationship=relationship,
            date=utc_today(),
            response=response.stripped(),
        )
        report.submissions.append(submission)
        await self._storage.set_model(f"direct_report:{report.id}", report)
        logger.info(
            f"Added submission {submission.id} for {report.name} "
            f"({len(report.submissions)}/{report.expected_count})."
        )
        return submission

    async def complete_cycle(self, report_id: str, notes: str, confirm: bool) -> DirectReport:
        """
        Closes the cycle with the manager's notes. Completion is final and only
        happens on explicit confirmation, never from the submission count.
        """
        if not confirm:
            raise ValidationFailedError("Completing a feedback cycle requires confirmation")

        report = await self.get_direct_report(report_id)
        if report.is_completed:
            logger.warning(f"Attempted to complete already completed cycle for {report_id}")
            raise InvalidTransitionError(f"The feedback cycle for {report.name} is already completed")
        if len(report.submissions) < self._min_submissions:
            raise ValidationFailedError(
                f"At least {self._min_submissions} submissions are required to complete a cycle "
                f"({len(report.submissions)} received)"
            )

        report.cycle_status = "Completed"
        report.manager_notes = notes
        report.completed_date = utc_today()
        await self._storage.set_model(f"direct_report:{report.id}", report)
        logger.info(f"Feedback cycle for {report.name} ({report_id}) has been completed.")
        return report

    async def generate_report(self, report_id: str) -> str:
        """Generates the AI summary for a direct report from its stored submissions."""
        report = await self.get_direct_report(report_id)
        return await self._reports.generate_report(report.name, report.role, report.submissions)
