"""Shared API dependencies."""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.services.clock import Clock, SystemClock
from app.services.visibility import Caller, Role

settings = get_settings()
bearer_scheme = HTTPBearer(auto_error=False)

__all__ = ["get_db", "get_clock", "get_current_user", "get_caller", "require_admin", "require_staff"]


def get_clock() -> Clock:
    """Time source for date-relative rules (overridden in tests)."""
    return SystemClock()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer access token to an active account."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        raise credentials_exception

    user_id: str | None = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def caller_for_user(user: User) -> Caller:
    return Caller(
        role=Role.parse(user.role),
        parent_id=user.parent_id,
        teacher_id=user.teacher_id,
        user_id=user.id,
    )


def get_caller(current_user: User = Depends(get_current_user)) -> Caller:
    return caller_for_user(current_user)


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return caller


def require_staff(caller: Caller = Depends(get_caller)) -> Caller:
    """Admin or Teacher."""
    if caller.role not in (Role.ADMIN, Role.TEACHER):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin or Teacher role required",
        )
    return caller
