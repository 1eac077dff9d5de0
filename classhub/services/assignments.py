"""Assignment lifecycle: create, read, submit, grade, unsubmit, comment,
update, publish and delete.

Every operation takes the database session and the acting user
explicitly. Expected failures are raised as ``classhub.core.errors``
exceptions; the HTTP layer renders them.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classhub.core.config import DEFAULT_POINTS
from classhub.core.errors import AuthorizationDenied, NotFound, UpstreamFailure, ValidationFailed
from classhub.models.assignment import Assignment
from classhub.models.attachment import Attachment
from classhub.models.comment import Comment
from classhub.models.submission import Submission
from classhub.models.user import ROLE_STUDENT, ROLE_TEACHER, User
from classhub.services import classrooms, storage
from classhub.services.lateness import as_utc

logger = logging.getLogger(__name__)

# recipients, classroom name, title, description, due date
NewAssignmentNotifier = Callable[[list[str], str, str, Optional[str], Optional[datetime]], Any]

UPDATABLE_FIELDS = ("title", "description", "due_date", "points", "collect_submissions")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_attachment(data: storage.AttachmentData) -> Attachment:
    return Attachment(
        filename=data.filename,
        url=data.url,
        content_type=data.content_type,
        size=data.size,
        storage_key=data.storage_key,
    )


def _discard_files(stored: list[storage.AttachmentData]) -> None:
    for data in stored:
        storage.delete(data.storage_key)


def get_assignment(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise NotFound("Assignment not found")
    return a


def _find_submission(db: Session, assignment_id: int, student_id: int) -> Optional[Submission]:
    return (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id, Submission.student_id == student_id)
        .first()
    )


def _ensure_owner(assignment: Assignment, teacher: User, message: str) -> None:
    # ownership is identity equality with the creating teacher, not a roster check
    if teacher.role != ROLE_TEACHER or assignment.teacher_id != teacher.id:
        raise AuthorizationDenied(message)


def _ensure_visible(assignment: Assignment, user: User) -> None:
    if user.role == ROLE_STUDENT and not assignment.is_published:
        raise NotFound("Assignment not found")


def submission_status(assignment: Assignment, student_id: int) -> dict:
    """The calling student's own view of their work on ``assignment``."""
    sub = assignment.submission_for(student_id)
    if sub is None:
        return {"submitted": False}
    return {
        "submitted": True,
        "submitted_at": sub.submitted_at,
        "grade": sub.grade,
        "feedback": sub.feedback,
        "is_graded": sub.is_graded,
        "status": sub.status,
    }


def create_assignment(
    db: Session,
    teacher: User,
    classroom_id: Optional[int],
    title: Optional[str],
    description: Optional[str] = None,
    due_date: Optional[datetime] = None,
    points: Optional[float] = None,
    collect_submissions: Optional[bool] = None,
    files: Optional[list[UploadFile]] = None,
    notify: Optional[NewAssignmentNotifier] = None,
) -> Assignment:
    if not classroom_id:
        raise ValidationFailed("Missing required fields: classroom")

    if teacher.role != ROLE_TEACHER:
        raise AuthorizationDenied("Invalid teacher ID or insufficient permissions")

    classroom = classrooms.get_classroom(db, classroom_id)
    if not classrooms.is_teacher_of(classroom, teacher):
        raise AuthorizationDenied("Only the classroom teacher can create assignments")

    if not title or not title.strip():
        raise ValidationFailed("Title is required")

    # individual upload failures are skipped, a partial set is fine here
    stored = storage.save_all(files or [])

    a = Assignment(
        classroom_id=classroom.id,
        teacher_id=teacher.id,
        title=title.strip(),
        description=description,
        due_date=as_utc(due_date),
        points=points if points is not None else DEFAULT_POINTS,
        collect_submissions=True if collect_submissions is None else collect_submissions,
        is_published=True,
        attachments=[_to_attachment(d) for d in stored],
    )
    db.add(a)
    try:
        db.commit()
    except Exception:
        db.rollback()
        _discard_files(stored)
        raise

    db.refresh(a)
    logger.info(
        "assignment %s created in classroom %s with %d attachment(s)",
        a.id,
        classroom.id,
        len(stored),
    )

    if notify is not None:
        recipients = classrooms.student_emails(db, classroom.id)
        if recipients:
            notify(recipients, classroom.name, a.title, a.description, a.due_date)

    return a


def list_assignments(db: Session, user: User, classroom_id: int) -> list[Assignment]:
    classroom = classrooms.get_classroom(db, classroom_id)
    classrooms.ensure_member(db, classroom, user)

    assignments = list(classroom.assignments)
    if user.role == ROLE_STUDENT:
        assignments = [a for a in assignments if a.is_published]
    return assignments


def get_assignment_for(db: Session, user: User, assignment_id: int) -> Assignment:
    a = get_assignment(db, assignment_id)
    classrooms.ensure_member(db, a.classroom, user)
    _ensure_visible(a, user)
    return a


def submit_assignment(
    db: Session,
    student: User,
    assignment_id: int,
    files: Optional[list[UploadFile]] = None,
    require_files: bool = False,
) -> Submission:
    a = get_assignment(db, assignment_id)
    classrooms.ensure_enrolled(db, a.classroom, student)
    _ensure_visible(a, student)

    if not a.collect_submissions:
        raise ValidationFailed("Submissions are not allowed for this assignment")

    if _find_submission(db, a.id, student.id) is not None:
        raise ValidationFailed("Assignment already submitted")

    uploads = storage.validate_uploads(files)
    if require_files and not uploads:
        raise ValidationFailed("Please attach at least one file")

    stored = storage.save_all(uploads)
    if uploads and not stored:
        raise UpstreamFailure("Failed to store submission files")

    sub = Submission(
        assignment_id=a.id,
        student_id=student.id,
        submitted_at=_utcnow(),
        attachments=[_to_attachment(d) for d in stored],
    )
    db.add(sub)

    # the unique constraint settles a race between two concurrent submits
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        _discard_files(stored)
        logger.info("duplicate submission rejected for assignment %s student %s", a.id, student.id)
        raise ValidationFailed("Assignment already submitted")

    db.refresh(sub)
    logger.info("student %s submitted assignment %s (%s)", student.id, a.id, sub.status)
    return sub


def mark_as_done(db: Session, student: User, assignment_id: int) -> Submission:
    return submit_assignment(db, student, assignment_id, files=None)


def unsubmit_assignment(db: Session, student: User, assignment_id: int) -> None:
    a = get_assignment(db, assignment_id)
    classrooms.ensure_enrolled(db, a.classroom, student)

    sub = _find_submission(db, a.id, student.id)
    if sub is None:
        raise NotFound("No submission to unsubmit")

    # allowed after the due date and after grading; the grade goes with it
    if sub.is_graded:
        logger.info("unsubmit discards grade for assignment %s student %s", a.id, student.id)

    keys = [att.storage_key for att in sub.attachments]
    db.delete(sub)
    db.commit()

    for key in keys:
        storage.delete(key)


def grade_submission(
    db: Session,
    teacher: User,
    assignment_id: int,
    student_id: int,
    grade: Optional[float],
    feedback: Optional[str] = None,
) -> Submission:
    a = get_assignment(db, assignment_id)
    _ensure_owner(a, teacher, "Not authorized to grade this assignment")

    sub = _find_submission(db, a.id, student_id)
    if sub is None:
        raise NotFound("Submission not found")

    sub.grade = grade
    sub.feedback = feedback
    sub.is_graded = True
    db.commit()
    db.refresh(sub)
    return sub


def add_comment(db: Session, user: User, assignment_id: int, text: Optional[str]) -> Comment:
    a = get_assignment(db, assignment_id)
    classrooms.ensure_member(db, a.classroom, user)
    _ensure_visible(a, user)

    text = (text or "").strip()
    if not text:
        raise ValidationFailed("Comment text is required")

    comment = Comment(assignment_id=a.id, author_id=user.id, text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def update_assignment(
    db: Session,
    teacher: User,
    assignment_id: int,
    changes: dict,
    files: Optional[list[UploadFile]] = None,
) -> Assignment:
    a = get_assignment(db, assignment_id)
    _ensure_owner(a, teacher, "You can only edit your own assignments")

    changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS and v is not None}
    if "title" in changes:
        if not changes["title"].strip():
            raise ValidationFailed("Title is required")
        changes["title"] = changes["title"].strip()
    if "due_date" in changes:
        changes["due_date"] = as_utc(changes["due_date"])

    uploads = files or []
    stored = storage.save_all(uploads)
    if uploads and not stored:
        raise UpstreamFailure("Error uploading files")

    for field, value in changes.items():
        setattr(a, field, value)
    # appended, never replacing what is already attached
    a.attachments.extend(_to_attachment(d) for d in stored)

    try:
        db.commit()
    except Exception:
        db.rollback()
        _discard_files(stored)
        raise

    db.refresh(a)
    return a


def toggle_publish(db: Session, teacher: User, assignment_id: int) -> Assignment:
    a = get_assignment(db, assignment_id)
    _ensure_owner(a, teacher, "Not authorized")

    a.is_published = not a.is_published
    db.commit()
    db.refresh(a)
    return a


def delete_assignment(db: Session, teacher: User, assignment_id: int) -> None:
    a = get_assignment(db, assignment_id)
    _ensure_owner(a, teacher, "You can only delete your own assignments")

    keys = a.storage_keys()

    # removes it from the classroom and drops submissions and comments with it
    db.delete(a)
    db.commit()

    for key in keys:
        if not storage.delete(key):
            logger.warning("could not delete stored file %s of assignment %s", key, assignment_id)
    logger.info("assignment %s deleted by teacher %s", assignment_id, teacher.id)
