"""Comment thread service: top-level comments and replies per entry."""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.entry import Entry
from app.models.interaction import TargetKind
from app.models.user import User
from app.schemas.comment import CommentCreate
from app.services import interaction_service

logger = logging.getLogger(__name__)


def _viewer_id(viewer: Optional[User]) -> Optional[int]:
    return viewer.user_id if viewer else None


def _get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise NotFoundError("Comment", comment_id, message="Comment not found")
    return comment


def _reply_counts(db: Session, comment_ids: List[int]) -> Dict[int, int]:
    counts = {int(comment_id): 0 for comment_id in comment_ids}
    if not comment_ids:
        return counts
    rows = (
        db.query(Comment.parent_id, func.count(Comment.id))
        .filter(Comment.parent_id.in_(comment_ids))
        .group_by(Comment.parent_id)
        .all()
    )
    for parent_id, count in rows:
        counts[int(parent_id)] = int(count)
    return counts


def _serialize(db: Session, rows, viewer: Optional[User]) -> List[Dict[str, Any]]:
    ids = [comment.id for comment, _username in rows]
    replies = _reply_counts(db, ids)
    votes = interaction_service.get_aggregates(db, TargetKind.COMMENT, ids)
    states = interaction_service.get_user_states(db, _viewer_id(viewer), TargetKind.COMMENT, ids)

    result = []
    for comment, username in rows:
        upvotes, downvotes = votes[comment.id]
        result.append(
            {
                "id": comment.id,
                "entry_id": comment.entry_id,
                "user_id": comment.user_id,
                "parent_id": comment.parent_id,
                "context": comment.context,
                "type": comment.type,
                "username": username,
                "num_of_replies": replies[comment.id],
                "upvotes": upvotes,
                "downvotes": downvotes,
                "user_interaction": states[comment.id],
                "created_at": comment.created_at,
            }
        )
    return result


def _comments_query(db: Session):
    return (
        db.query(Comment, User.username)
        .join(User, User.user_id == Comment.user_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )


def list_top_level(db: Session, entry_id: int, viewer: Optional[User] = None) -> List[Dict[str, Any]]:
    if not db.query(Entry.id).filter(Entry.id == entry_id).first():
        raise NotFoundError("Entry", entry_id, message="Entry not found")
    rows = (
        _comments_query(db)
        .filter(Comment.entry_id == entry_id, Comment.parent_id.is_(None))
        .all()
    )
    return _serialize(db, rows, viewer)


def list_replies(db: Session, comment_id: int, viewer: Optional[User] = None) -> List[Dict[str, Any]]:
    _get_comment_or_404(db, comment_id)
    rows = _comments_query(db).filter(Comment.parent_id == comment_id).all()
    return _serialize(db, rows, viewer)


def add_comment(db: Session, data: CommentCreate, author: User) -> Dict[str, Any]:
    context = (data.context or "").strip()
    comment_type = (data.type or "").strip()
    missing = [name for name, value in (("context", context), ("type", comment_type)) if not value]
    if missing:
        raise ValidationError("Missing required fields", details={"fields": missing})

    if not db.query(Entry.id).filter(Entry.id == data.entry_id).first():
        raise NotFoundError("Entry", data.entry_id, message="Entry not found")

    parent_id = data.parent_id or None
    if parent_id is not None:
        parent = _get_comment_or_404(db, parent_id)
        if parent.entry_id != data.entry_id:
            raise ValidationError(
                "Parent comment belongs to a different entry",
                details={"parent_id": parent_id, "entry_id": data.entry_id},
            )

    comment = Comment(
        entry_id=data.entry_id,
        user_id=author.user_id,
        parent_id=parent_id,
        context=context,
        type=comment_type,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s added to entry %s by %s", comment.id, comment.entry_id, author.username)
    return _serialize(db, [(comment, author.username)], author)[0]


def vote_on_comment(db: Session, comment_id: int, voter: User, interaction_type) -> Dict[str, object]:
    return interaction_service.vote(
        db,
        user_id=voter.user_id,
        kind=TargetKind.COMMENT,
        target_id=comment_id,
        requested=interaction_type,
    )
