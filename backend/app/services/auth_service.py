"""Auth service: mock sign-in that issues bearer tokens carrying the username."""

from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from app.exceptions import UnauthorizedError
from app.models.user import User
from app.config import settings
from app.services import user_service

ALGORITHM = "HS256"


def create_access_token(username: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": username, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_login(db: Session, username: str) -> User:
    user = user_service.find_user_by_username(db, username)
    if not user:
        raise UnauthorizedError(f"No active user found for username '{username}'")
    return user
