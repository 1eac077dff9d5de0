import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from classhub.core.deps import get_db
from classhub.core.errors import AuthenticationRequired
from classhub.core.security import decode_access_token
from classhub.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthenticationRequired("No authentication token provided")

    payload = decode_access_token(token)
    if payload is None or "sub" not in payload:
        raise AuthenticationRequired("Authentication failed")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationRequired("Authentication failed")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.info("token for unknown user id %s", user_id)
        raise AuthenticationRequired("Authentication failed")
    return user
