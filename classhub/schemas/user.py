from typing import Literal

from pydantic import AliasChoices, BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    full_name: str | None = Field(default=None, validation_alias=AliasChoices("full_name", "name"))
    role: Literal["teacher", "student"] = "student"


class UserRead(BaseModel):
    id: int
    email: EmailStr
    full_name: str | None = None
    role: str

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    email: str
    full_name: str | None = None

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    success: bool = True
    message: str | None = None
    user: UserRead
