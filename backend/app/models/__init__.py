"""SQLAlchemy model package; importing it registers every table on the metadata."""

from app.models.user import User
from app.models.entry import Entry, EntryRevision
from app.models.tag import Tag, TagAssociation
from app.models.comment import Comment
from app.models.interaction import EntryInteraction, ConversationInteraction

__all__ = [
    "User",
    "Entry", "EntryRevision",
    "Tag", "TagAssociation",
    "Comment",
    "EntryInteraction", "ConversationInteraction",
]
