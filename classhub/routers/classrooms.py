from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classhub.core.current_user import get_current_user
from classhub.core.deps import get_db
from classhub.core.permissions import require_student, require_teacher
from classhub.models.user import User
from classhub.schemas.classroom import (
    ClassroomCreate,
    ClassroomDetail,
    ClassroomDetailEnvelope,
    ClassroomEnvelope,
    ClassroomJoin,
    ClassroomList,
    ClassroomRead,
)
from classhub.schemas.common import MessageResponse
from classhub.schemas.user import UserSummary
from classhub.services import classrooms

router = APIRouter()


@router.post("", response_model=ClassroomEnvelope, status_code=status.HTTP_201_CREATED)
def create_classroom(
    payload: ClassroomCreate,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    classroom = classrooms.create_classroom(
        db,
        teacher,
        name=payload.name,
        subject=payload.subject,
        description=payload.description,
        code=payload.code,
    )
    return {
        "message": "Classroom created successfully",
        "classroom": ClassroomRead.model_validate(classroom),
    }


@router.get("/me", response_model=ClassroomList)
def my_classrooms(
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    rows = classrooms.list_my_classrooms(db, me)
    return {"classrooms": [ClassroomRead.model_validate(c) for c in rows]}


@router.post("/join", response_model=ClassroomEnvelope)
def join_classroom(
    payload: ClassroomJoin,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    classroom = classrooms.join_by_code(db, me, payload.code)
    return {
        "message": "Successfully joined classroom",
        "classroom": ClassroomRead.model_validate(classroom),
    }


@router.get("/{classroom_id}", response_model=ClassroomDetailEnvelope)
def get_classroom(
    classroom_id: int,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    classroom = classrooms.get_classroom(db, classroom_id)
    classrooms.ensure_member(db, classroom, me)

    detail = ClassroomDetail.model_validate(classroom)
    detail.students = [
        UserSummary.model_validate(s) for s in classrooms.enrolled_students(db, classroom.id)
    ]
    return {"classroom": detail}


@router.post("/{classroom_id}/leave", response_model=MessageResponse)
def leave_classroom(
    classroom_id: int,
    db: Session = Depends(get_db),
    student: User = Depends(require_student),
):
    classrooms.leave_classroom(db, student, classroom_id)
    return {"message": "Successfully left classroom"}


@router.delete("/{classroom_id}", response_model=MessageResponse)
def delete_classroom(
    classroom_id: int,
    db: Session = Depends(get_db),
    teacher: User = Depends(require_teacher),
):
    classrooms.delete_classroom(db, teacher, classroom_id)
    return {"message": "Classroom deleted successfully"}
