import re
import typing
from typing import Dict, List, Optional

from pydantic import Field

from ..storage.models import (
    CamelModel,
    CollaborationFrequency,
    FeedbackDraft,
    FeedbackResponse,
    FieldName,
    Relationship,
    ReportSubmission,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RELATIONSHIPS = typing.get_args(Relationship)
COLLABORATION_FREQUENCIES = typing.get_args(CollaborationFrequency)


class EnhanceFeedbackRequest(CamelModel):
    feedback: Optional[FeedbackResponse] = None


class GenerateReportRequest(CamelModel):
    employee_name: str = Field(default="", alias="employeeName")
    employee_role: str = Field(default="", alias="employeeRole")
    feedback_submissions: List[ReportSubmission] = Field(default_factory=list, alias="feedbackSubmissions")


class GenerateReportResponse(CamelModel):
    report: str


class TranscriptionResponse(CamelModel):
    text: str


class SendRequestBody(CamelModel):
    """New feedback request. Fields are validated by `validation_errors` so
    that missing input is reported as a 400 with a per-field message."""

    name: str = ""
    email: str = ""
    relationship: str = ""
    collaboration_frequency: List[str] = Field(default_factory=list, alias="collaborationFrequency")

    def validation_errors(self) -> Dict[str, str]:
        errors = {}
        if not self.name.strip():
            errors["name"] = "Name is required"
        if not self.email.strip():
            errors["email"] = "Email is required"
        elif not EMAIL_PATTERN.match(self.email.strip()):
            errors["email"] = "Please enter a valid email address"
        if self.relationship not in RELATIONSHIPS:
            errors["relationship"] = "Please select a relationship"
        if not self.collaboration_frequency:
            errors["collaborationFrequency"] = "Please select at least one option"
        elif any(freq not in COLLABORATION_FREQUENCIES for freq in self.collaboration_frequency):
            errors["collaborationFrequency"] = "Unknown collaboration frequency"
        return errors


class DictationStartBody(CamelModel):
    field: FieldName


class DictationStatus(CamelModel):
    active_field: Optional[FieldName] = Field(default=None, alias="activeField")
    is_recording: bool = Field(alias="isRecording")
    is_transcribing: bool = Field(alias="isTranscribing")


class DictationStopResponse(CamelModel):
    field: Optional[FieldName] = None
    text: Optional[str] = None
    draft: FeedbackDraft


class SubmissionBody(CamelModel):
    submitter_name: str = Field(min_length=1, alias="submitterName")
    submitter_email: Optional[str] = Field(default=None, alias="submitterEmail")
    relationship: Relationship
    response: FeedbackResponse


class CompleteCycleBody(CamelModel):
    notes: str = ""
    confirm: bool = False
