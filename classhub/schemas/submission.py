from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from classhub.schemas.attachment import AttachmentRead
from classhub.schemas.user import UserSummary
from classhub.services.lateness import as_utc


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    student: UserSummary
    submitted_at: datetime
    grade: Optional[float] = None
    feedback: Optional[str] = None
    is_graded: bool = False
    attachments: list[AttachmentRead] = []

    # computed on every read, never stored
    status: Literal["on_time", "late"] = "on_time"
    is_late: bool = False
    late_by_minutes: Optional[int] = None

    @field_validator("submitted_at")
    @classmethod
    def submitted_at_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


class SubmissionStatus(BaseModel):
    submitted: bool
    submitted_at: Optional[datetime] = None
    grade: Optional[float] = None
    feedback: Optional[str] = None
    is_graded: Optional[bool] = None
    status: Optional[Literal["on_time", "late"]] = None

    @field_validator("submitted_at")
    @classmethod
    def submitted_at_utc(cls, v):
        return as_utc(v)


class SubmissionGradeUpdate(BaseModel):
    grade: Optional[float] = None
    feedback: Optional[str] = None


class StudentGradeUpdate(SubmissionGradeUpdate):
    student_id: int


class SubmissionEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    submission: SubmissionRead
