"""Authentication API endpoints."""
from datetime import datetime, timedelta
import logging

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from jose import jwt
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.config import get_settings
from app.models.user import User
from app.schemas.auth import Token, UserLogin, UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> tuple[str, datetime]:
    """Create a JWT access token. Returns the token and its expiry."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm), expire


def create_user_account(
    db: Session,
    email: str,
    password: str,
    role: str,
    first_name: str = "",
    last_name: str = "",
    parent_id: int | None = None,
    teacher_id: int | None = None,
) -> User:
    """Add a login account to the session (caller commits)."""
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        parent_id=parent_id,
        teacher_id=teacher_id,
    )
    db.add(user)
    return user


def ensure_admin_account(db: Session, email: str, password: str) -> User:
    """Create the bootstrap admin if no account uses ``email`` yet."""
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = create_user_account(db, email, password, "Admin", first_name="Admin", last_name="User")
    logger.info(f"Created bootstrap admin account {email}")
    return user


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """Login and get an access token."""
    user = db.query(User).filter(User.email == user_data.email).first()

    if not user or not user.is_active or not verify_password(user_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token, expire = create_access_token({"sub": user.id, "role": user.role})
    return Token(access_token=access_token, role=user.role, expires_at=expire.isoformat())


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Current account."""
    return current_user
