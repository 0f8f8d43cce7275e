import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

RequestStatus = Literal["Pending", "Submitted", "Completed"]
CycleStatus = Literal["Ongoing", "Completed"]
Relationship = Literal["manager", "peer", "direct-report", "cross-functional"]
CollaborationFrequency = Literal["daily", "weekly", "monthly", "rarely"]
FieldName = Literal["startDoing", "stopDoing", "continueDoing", "otherComments"]

# Order matters: enhancement results are joined back positionally.
RESPONSE_FIELDS: tuple[str, ...] = ("start_doing", "stop_doing", "continue_doing", "other_comments")
FIELD_ALIASES = {
    "startDoing": "start_doing",
    "stopDoing": "stop_doing",
    "continueDoing": "continue_doing",
    "otherComments": "other_comments",
}


def utc_today() -> dt.date:
    """Today's date in UTC, the calendar used for every stored date."""
    return dt.datetime.now(dt.timezone.utc).date()


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class FeedbackResponse(CamelModel):
    """The four free-text answers of a Start/Stop/Continue response."""

    start_doing: str = Field(default="", alias="startDoing")
    stop_doing: str = Field(default="", alias="stopDoing")
    continue_doing: str = Field(default="", alias="continueDoing")
    other_comments: str = Field(default="", alias="otherComments")

    def is_blank(self) -> bool:
        return not any(getattr(self, name).strip() for name in RESPONSE_FIELDS)

    def stripped(self) -> "FeedbackResponse":
        return FeedbackResponse(**{name: getattr(self, name).strip() for name in RESPONSE_FIELDS})


class FeedbackRequest(CamelModel):
    id: str
    name: str
    date: dt.date
    status: RequestStatus = "Pending"


class SentRequest(FeedbackRequest):
    """A request the current user sent to a colleague."""

    email: Optional[str] = None
    relationship: Optional[Relationship] = None
    collaboration_frequency: List[CollaborationFrequency] = Field(
        default_factory=list, alias="collaborationFrequency"
    )


class ReceivedRequest(FeedbackRequest):
    """A request someone sent to the current user. `name` is the requester."""

    response: Optional[FeedbackResponse] = None


class ReportSubmission(CamelModel):
    """The part of a submission that goes into a report prompt."""

    submitter_name: str = Field(alias="submitterName")
    relationship: str
    response: FeedbackResponse


class FeedbackSubmission(ReportSubmission):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    submitter_email: Optional[str] = Field(default=None, alias="submitterEmail")
    relationship: Relationship
    date: dt.date

    @field_validator("relationship", mode="before")
    @classmethod
    def normalize_relationship(cls, v: str) -> str:
        # Accept display labels such as "Peer" or "Cross-functional"
        if isinstance(v, str):
            return v.strip().lower().replace(" ", "-")
        return v


class DirectReport(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    role: str
    cycle_status: CycleStatus = Field(default="Ongoing", alias="cycleStatus")
    expected_count: int = Field(default=0, alias="feedbackCount")
    submissions: List[FeedbackSubmission] = Field(
        default_factory=list, alias="feedbackSubmissions"
    )
    manager_notes: Optional[str] = Field(default=None, alias="managerNotes")
    completed_date: Optional[dt.date] = Field(default=None, alias="completedDate")

    @computed_field(alias="submissionCount")
    @property
    def submission_count(self) -> int:
        return len(self.submissions)

    @property
    def is_completed(self) -> bool:
        return self.cycle_status == "Completed"


class FeedbackDraft(CamelModel):
    request_id: str = Field(alias="requestId")
    response: FeedbackResponse = Field(default_factory=FeedbackResponse)
