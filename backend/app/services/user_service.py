"""User directory service: username lookup and account registration."""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.user import User
from app.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def find_user_by_username(db: Session, username: Optional[str]) -> Optional[User]:
    name = (username or "").strip()
    if not name:
        return None
    return db.query(User).filter(User.username == name, User.is_active == True).first()  # noqa: E712


def get_user_by_username(db: Session, username: str) -> User:
    user = find_user_by_username(db, username)
    if not user:
        raise NotFoundError("User", username, message="User not found")
    return user


def create_user(db: Session, data: UserCreate) -> User:
    username = (data.username or "").strip()
    if not username:
        raise ValidationError("Missing required fields", details={"field": "username"})
    email = (data.email or "").strip() or None

    if db.query(User.user_id).filter(User.username == username).first():
        raise ConflictError("Username already exists", details={"field": "username"})
    if email and db.query(User.user_id).filter(User.email == email).first():
        raise ConflictError("Email already exists", details={"field": "email"})

    user = User(
        username=username,
        first_name=(data.first_name or "").strip(),
        last_name=(data.last_name or "").strip(),
        email=email,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # a concurrent registration won the unique constraint
        db.rollback()
        raise ConflictError("Username or email already exists")
    db.refresh(user)
    logger.info("Registered user %s (id=%s)", user.username, user.user_id)
    return user
