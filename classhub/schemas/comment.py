from datetime import datetime

from pydantic import BaseModel, Field

from classhub.schemas.user import UserSummary


class CommentCreate(BaseModel):
    text: str = Field(max_length=5000)


class CommentRead(BaseModel):
    id: int
    author: UserSummary
    text: str
    created_at: datetime

    class Config:
        from_attributes = True


class CommentEnvelope(BaseModel):
    success: bool = True
    comment: CommentRead
