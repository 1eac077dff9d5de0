from fastapi import Depends

from classhub.core.current_user import get_current_user
from classhub.core.errors import AuthorizationDenied
from classhub.models.user import ROLE_STUDENT, ROLE_TEACHER, User


def require_teacher(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != ROLE_TEACHER:
        raise AuthorizationDenied("Access denied. Teacher role required.")
    return current_user


def require_student(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != ROLE_STUDENT:
        raise AuthorizationDenied("Access denied. Student role required.")
    return current_user
