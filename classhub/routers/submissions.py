from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from classhub.core.deps import get_db
from classhub.core.current_user import get_current_user
from classhub.core.permissions import require_teacher
from classhub.models.user import User
from classhub.schemas.common import MessageResponse
from classhub.schemas.submission import (
    StudentGradeUpdate,
    SubmissionEnvelope,
    SubmissionGradeUpdate,
    SubmissionRead,
)
from classhub.services import assignments

router = APIRouter()


@router.post(
    "/{assignment_id}/submit",
    response_model=SubmissionEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    files: Optional[list[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    student: User = Depends(get_current_user),
):
    # the engine accepts empty work (see mark-done); this endpoint wants a file
    sub = assignments.submit_assignment(db, student, assignment_id, files=files, require_files=True)
    return {
        "message": "Assignment submitted successfully",
        "submission": SubmissionRead.model_validate(sub),
    }


@router.post(
    "/{assignment_id}/mark-done",
    response_model=SubmissionEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def mark_as_done(
    assignment_id: int,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_user),
):
    sub = assignments.mark_as_done(db, student, assignment_id)
    return {
        "message": "Assignment marked as done successfully",
        "submission": SubmissionRead.model_validate(sub),
    }


@router.post("/{assignment_id}/unsubmit", response_model=MessageResponse)
def unsubmit_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    student: User = Depends(get_current_user),
):
    assignments.unsubmit_assignment(db, student, assignment_id)
    return {"message": "Submission removed"}


@router.post("/{assignment_id}/grade", response_model=SubmissionEnvelope)
def grade_assignment(
    assignment_id: int,
    payload: StudentGradeUpdate,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    sub = assignments.grade_submission(
        db, teacher, assignment_id, payload.student_id, payload.grade, payload.feedback
    )
    return {
        "message": "Assignment graded successfully",
        "submission": SubmissionRead.model_validate(sub),
    }


@router.post(
    "/{assignment_id}/submissions/{student_id}/grade",
    response_model=SubmissionEnvelope,
)
def grade_student_submission(
    assignment_id: int,
    student_id: int,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    sub = assignments.grade_submission(
        db, teacher, assignment_id, student_id, payload.grade, payload.feedback
    )
    return {
        "message": "Assignment graded successfully",
        "submission": SubmissionRead.model_validate(sub),
    }
