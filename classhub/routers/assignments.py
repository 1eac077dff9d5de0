from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from classhub.core.current_user import get_current_user
from classhub.core.deps import get_db
from classhub.core.permissions import require_teacher
from classhub.models.user import User
from classhub.schemas.assignment import (
    AssignmentEnvelope,
    AssignmentList,
    PublishState,
    assignment_view,
)
from classhub.schemas.comment import CommentCreate, CommentEnvelope, CommentRead
from classhub.schemas.common import MessageResponse
from classhub.services import assignments, notifier
from classhub.services.storage import validate_uploads

router = APIRouter()


@router.post("", response_model=AssignmentEnvelope, status_code=status.HTTP_201_CREATED)
def create_assignment(
    background_tasks: BackgroundTasks,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    due_date: Optional[datetime] = Form(None),
    points: Optional[float] = Form(None),
    classroom_id: Optional[int] = Form(None),
    collect_submissions: Optional[bool] = Form(None),
    attachments: Optional[list[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    uploads = validate_uploads(attachments)

    def notify(*args):
        background_tasks.add_task(notifier.notify_new_assignment, *args)

    a = assignments.create_assignment(
        db,
        teacher,
        classroom_id=classroom_id,
        title=title,
        description=description,
        due_date=due_date,
        points=points,
        collect_submissions=collect_submissions,
        files=uploads,
        notify=notify,
    )
    return {"message": "Assignment created successfully", "assignment": assignment_view(a, teacher)}


@router.get("/classroom/{classroom_id}", response_model=AssignmentList)
def list_classroom_assignments(
    classroom_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    rows = assignments.list_assignments(db, me, classroom_id)
    return {"assignments": [assignment_view(a, me) for a in rows]}


@router.get("/{assignment_id}", response_model=AssignmentEnvelope)
def get_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    a = assignments.get_assignment_for(db, me, assignment_id)
    return {"assignment": assignment_view(a, me)}


@router.put("/{assignment_id}", response_model=AssignmentEnvelope)
def update_assignment(
    assignment_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    due_date: Optional[datetime] = Form(None),
    points: Optional[float] = Form(None),
    collect_submissions: Optional[bool] = Form(None),
    attachments: Optional[list[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    uploads = validate_uploads(attachments)
    changes = {
        "title": title,
        "description": description,
        "due_date": due_date,
        "points": points,
        "collect_submissions": collect_submissions,
    }
    a = assignments.update_assignment(db, teacher, assignment_id, changes, files=uploads)
    return {"message": "Assignment updated successfully", "assignment": assignment_view(a, teacher)}


@router.post("/{assignment_id}/publish", response_model=PublishState)
def toggle_publish(
    assignment_id: int,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    a = assignments.toggle_publish(db, teacher, assignment_id)
    state = "published" if a.is_published else "unpublished"
    return {"message": f"Assignment {state} successfully", "is_published": a.is_published}


@router.delete("/{assignment_id}", response_model=MessageResponse)
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    assignments.delete_assignment(db, teacher, assignment_id)
    return {"message": "Assignment deleted successfully"}


@router.post(
    "/{assignment_id}/comments",
    response_model=CommentEnvelope,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    assignment_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    comment = assignments.add_comment(db, me, assignment_id, payload.text)
    return {"comment": CommentRead.model_validate(comment)}
