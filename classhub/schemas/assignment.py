from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from classhub.models.assignment import Assignment
from classhub.models.user import ROLE_STUDENT, User
from classhub.schemas.attachment import AttachmentRead
from classhub.schemas.comment import CommentRead
from classhub.schemas.submission import SubmissionRead, SubmissionStatus
from classhub.schemas.user import UserSummary
from classhub.services.assignments import submission_status
from classhub.services.lateness import as_utc


class AssignmentRead(BaseModel):
    id: int
    classroom_id: int
    teacher: UserSummary
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    points: float
    is_published: bool
    collect_submissions: bool
    attachments: list[AttachmentRead] = []
    submissions: list[SubmissionRead] = []
    comments: list[CommentRead] = []
    created_at: datetime
    updated_at: datetime

    # only set for student callers
    submission_status: Optional[SubmissionStatus] = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


def assignment_view(a: Assignment, user: User) -> AssignmentRead:
    """Role-aware view: a student only ever sees their own submission."""
    view = AssignmentRead.model_validate(a)
    if user.role == ROLE_STUDENT:
        view.submissions = [s for s in view.submissions if s.student_id == user.id]
        view.submission_status = SubmissionStatus(**submission_status(a, user.id))
    return view


class AssignmentEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    assignment: AssignmentRead


class AssignmentList(BaseModel):
    success: bool = True
    assignments: list[AssignmentRead]


class PublishState(BaseModel):
    success: bool = True
    message: str
    is_published: bool
