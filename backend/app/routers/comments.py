"""Comments API router. Validates requests and delegates to the service layer."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.comment import CommentCreate, CommentOut
from app.schemas.interaction import VoteRequest, VoteResult
from app.services import comment_service
from app.middleware.auth_middleware import get_current_user, get_optional_user
from app.models.user import User

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.add_comment(db, data, current_user)


@router.get("/{comment_id}/replies", response_model=List[CommentOut])
def list_replies(
    comment_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return comment_service.list_replies(db, comment_id, viewer)


@router.post("/{comment_id}/vote", response_model=VoteResult)
def vote_on_comment(
    comment_id: int,
    data: VoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return comment_service.vote_on_comment(db, comment_id, current_user, data.interaction_type)
