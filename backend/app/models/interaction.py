"""Vote ledger SQLAlchemy models, one isomorphic table per target kind."""

import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from app.database import Base


class InteractionType(str, enum.Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class TargetKind(str, enum.Enum):
    ENTRY = "entry"
    COMMENT = "comment"


class EntryInteraction(Base):
    __tablename__ = "entry_interactions"

    # composite key = at most one active vote per (entry, user)
    entry_id = Column(Integer, ForeignKey("entry.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    interaction_type = Column(String(10), nullable=False)  # upvote/downvote
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_entry_interactions_type", "entry_id", "interaction_type"),
    )


class ConversationInteraction(Base):
    __tablename__ = "conversation_interactions"

    conversation_id = Column(Integer, ForeignKey("conversation.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    interaction_type = Column(String(10), nullable=False)  # upvote/downvote
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_conversation_interactions_type", "conversation_id", "interaction_type"),
    )
