"""Entry domain SQLAlchemy models: geolocated entries and their revision history."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Float, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Entry(Base):
    __tablename__ = "entry"

    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(300), nullable=False)
    creator_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    longitude = Column(Float, nullable=False)  # WGS84 degrees
    latitude = Column(Float, nullable=False)
    views = Column(Integer, default=0, nullable=False)
    date_created = Column(DateTime, server_default=func.now())

    creator = relationship("User", back_populates="entries")
    revisions = relationship(
        "EntryRevision",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="EntryRevision.revision_number",
    )
    comments = relationship("Comment", back_populates="entry", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_entry_location", "latitude", "longitude"),
    )


class EntryRevision(Base):
    __tablename__ = "entry_revision"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entry_id = Column(Integer, ForeignKey("entry.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    revision_number = Column(Integer, nullable=False)
    creator_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    date_created = Column(DateTime, server_default=func.now())

    entry = relationship("Entry", back_populates="revisions")
    creator = relationship("User")
    tags = relationship("Tag", secondary="tags_entry_revision", order_by="Tag.name", viewonly=True)

    __table_args__ = (
        UniqueConstraint("entry_id", "revision_number", name="uq_entry_revision_number"),
    )
