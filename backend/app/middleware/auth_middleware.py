from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from app.database import get_db
from app.exceptions import UnauthorizedError
from app.models.user import User
from app.config import settings
from app.services import user_service

security = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise UnauthorizedError("Invalid or expired token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")
    payload = decode_token(credentials.credentials)
    username = payload.get("sub")
    if not username:
        raise UnauthorizedError("Invalid token payload")

    user = user_service.find_user_by_username(db, str(username))
    if not user:
        raise UnauthorizedError("User not found or inactive")
    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User | None:
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except UnauthorizedError:
        return None
    return user_service.find_user_by_username(db, str(payload.get("sub") or ""))
