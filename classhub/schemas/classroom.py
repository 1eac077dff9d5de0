from datetime import datetime

from pydantic import BaseModel, Field

from classhub.schemas.user import UserSummary


class ClassroomCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subject: str = Field(min_length=1, max_length=255)
    description: str | None = None
    code: str | None = Field(default=None, min_length=4, max_length=32)


class ClassroomJoin(BaseModel):
    code: str = Field(min_length=1)


class ClassroomRead(BaseModel):
    id: int
    name: str
    subject: str
    description: str | None = None
    code: str
    teacher: UserSummary
    created_at: datetime

    class Config:
        from_attributes = True


class ClassroomDetail(ClassroomRead):
    students: list[UserSummary] = []


class ClassroomEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    classroom: ClassroomRead


class ClassroomDetailEnvelope(BaseModel):
    success: bool = True
    classroom: ClassroomDetail


class ClassroomList(BaseModel):
    success: bool = True
    classrooms: list[ClassroomRead]
