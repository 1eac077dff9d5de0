import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from classhub.core.config import ACCESS_TOKEN_EXPIRE
from classhub.core.current_user import get_current_user
from classhub.core.deps import get_db
from classhub.core.errors import AuthenticationRequired, ValidationFailed
from classhub.core.security import create_access_token, hash_password, verify_password
from classhub.models.user import User
from classhub.schemas.auth import LoginRequest, Token
from classhub.schemas.user import UserCreate, UserEnvelope, UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Email already registered"},
    },
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    email = payload.email.lower()
    existing_user = db.query(User).filter(User.email == email).first()
    if existing_user:
        raise ValidationFailed("Email already registered")

    user = User(
        email=email,
        full_name=payload.full_name,
        hashed_password=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("registered %s user %s", user.role, user.id)
    return {"message": "User registered successfully", "user": UserRead.model_validate(user)}


@router.post(
    "/login",
    response_model=Token,
    responses={
        401: {"description": "Invalid credentials"},
    },
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise AuthenticationRequired("Invalid credentials")

    access_token = create_access_token(
        data={"sub": str(user.id), "role": user.role},
        expires_delta=ACCESS_TOKEN_EXPIRE,
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserRead.model_validate(user),
    }


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    return {"user": UserRead.model_validate(current_user)}
