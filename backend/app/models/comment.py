"""Comment thread SQLAlchemy model over the conversation relation."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Comment(Base):
    __tablename__ = "conversation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(Integer, ForeignKey("entry.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    parent_id = Column(Integer, ForeignKey("conversation.id", ondelete="CASCADE"), nullable=True)  # null = top level
    context = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    entry = relationship("Entry", back_populates="comments")
    author = relationship("User", back_populates="comments")

    __table_args__ = (
        Index("idx_conversation_entry_parent", "entry_id", "parent_id"),
        Index("idx_conversation_parent", "parent_id"),
    )
