import logging
import secrets
import string
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from classhub.core.errors import AuthorizationDenied, NotFound, ValidationFailed
from classhub.models.classroom import Classroom
from classhub.models.enrollment import Enrollment
from classhub.models.user import ROLE_STUDENT, ROLE_TEACHER, User
from classhub.services import storage

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def generate_class_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def get_classroom(db: Session, classroom_id: int) -> Classroom:
    classroom = db.query(Classroom).filter(Classroom.id == classroom_id).first()
    if not classroom:
        raise NotFound("Classroom not found")
    return classroom


def is_teacher_of(classroom: Classroom, user: User) -> bool:
    return user.role == ROLE_TEACHER and classroom.teacher_id == user.id


def is_enrolled(db: Session, classroom_id: int, student_id: int) -> bool:
    return (
        db.query(Enrollment)
        .filter(Enrollment.classroom_id == classroom_id, Enrollment.student_id == student_id)
        .first()
        is not None
    )


def is_member(db: Session, classroom: Classroom, user: User) -> bool:
    if user.role == ROLE_TEACHER:
        return is_teacher_of(classroom, user)
    return is_enrolled(db, classroom.id, user.id)


def ensure_member(db: Session, classroom: Classroom, user: User) -> None:
    if not is_member(db, classroom, user):
        raise AuthorizationDenied("Access denied")


def ensure_enrolled(db: Session, classroom: Classroom, student: User) -> None:
    if student.role != ROLE_STUDENT or not is_enrolled(db, classroom.id, student.id):
        raise AuthorizationDenied("Not enrolled in this classroom")


def enrolled_students(db: Session, classroom_id: int) -> list[User]:
    return (
        db.query(User)
        .join(Enrollment, Enrollment.student_id == User.id)
        .filter(Enrollment.classroom_id == classroom_id)
        .order_by(User.email.asc())
        .all()
    )


def student_emails(db: Session, classroom_id: int) -> list[str]:
    return [s.email for s in enrolled_students(db, classroom_id) if s.email]


def create_classroom(
    db: Session,
    teacher: User,
    name: str,
    subject: str,
    description: Optional[str] = None,
    code: Optional[str] = None,
) -> Classroom:
    if teacher.role != ROLE_TEACHER:
        raise AuthorizationDenied("Access denied. Teacher role required.")

    if code:
        code = code.strip().upper()
        if db.query(Classroom).filter(Classroom.code == code).first():
            raise ValidationFailed("Class code already exists. Please choose a different one.")
    else:
        code = generate_class_code()
        while db.query(Classroom).filter(Classroom.code == code).first():
            code = generate_class_code()

    classroom = Classroom(
        name=name.strip(),
        subject=subject.strip(),
        description=description,
        code=code,
        teacher_id=teacher.id,
    )
    db.add(classroom)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed("Class code already exists. Please choose a different one.")
    db.refresh(classroom)
    logger.info("classroom %s created by teacher %s with code %s", classroom.id, teacher.id, code)
    return classroom


def list_my_classrooms(db: Session, user: User) -> list[Classroom]:
    if user.role == ROLE_TEACHER:
        return (
            db.query(Classroom)
            .filter(Classroom.teacher_id == user.id)
            .order_by(Classroom.created_at.desc(), Classroom.id.desc())
            .all()
        )
    return (
        db.query(Classroom)
        .join(Enrollment, Enrollment.classroom_id == Classroom.id)
        .filter(Enrollment.student_id == user.id)
        .order_by(Classroom.created_at.desc(), Classroom.id.desc())
        .all()
    )


def join_by_code(db: Session, student: User, code: str) -> Classroom:
    if student.role == ROLE_TEACHER:
        raise AuthorizationDenied("Teachers cannot join classrooms as students")

    classroom = db.query(Classroom).filter(Classroom.code == (code or "").strip().upper()).first()
    if not classroom:
        raise NotFound("Invalid class code")

    if is_enrolled(db, classroom.id, student.id):
        raise ValidationFailed("You are already enrolled in this classroom")

    db.add(Enrollment(classroom_id=classroom.id, student_id=student.id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed("You are already enrolled in this classroom")

    db.refresh(classroom)
    logger.info("student %s joined classroom %s", student.id, classroom.id)
    return classroom


def leave_classroom(db: Session, student: User, classroom_id: int) -> None:
    get_classroom(db, classroom_id)
    enrollment = (
        db.query(Enrollment)
        .filter(Enrollment.classroom_id == classroom_id, Enrollment.student_id == student.id)
        .first()
    )
    if not enrollment:
        raise NotFound("Not enrolled in this classroom")
    db.delete(enrollment)
    db.commit()


def delete_classroom(db: Session, teacher: User, classroom_id: int) -> None:
    classroom = get_classroom(db, classroom_id)
    if not is_teacher_of(classroom, teacher):
        raise AuthorizationDenied("You can only delete your own classrooms")

    keys = [key for a in classroom.assignments for key in a.storage_keys()]
    db.delete(classroom)
    db.commit()

    for key in keys:
        if not storage.delete(key):
            logger.warning("could not delete stored file %s of classroom %s", key, classroom_id)
    logger.info("classroom %s deleted by teacher %s", classroom_id, teacher.id)
