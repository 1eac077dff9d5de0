from pydantic import BaseModel, EmailStr

from classhub.schemas.user import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: UserRead
