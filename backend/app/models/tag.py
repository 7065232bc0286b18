"""Tag registry SQLAlchemy models."""

from sqlalchemy import Column, Integer, String, ForeignKey
from app.database import Base


class Tag(Base):
    __tablename__ = "tags"

    name = Column(String(100), primary_key=True)
    classification = Column(String(100), nullable=False, default="")


class TagAssociation(Base):
    __tablename__ = "tags_entry_revision"

    entry_revision_id = Column(Integer, ForeignKey("entry_revision.id", ondelete="CASCADE"), primary_key=True)
    tag_name = Column(String(100), ForeignKey("tags.name"), primary_key=True)
