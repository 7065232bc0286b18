"""Revision chain service: append-only, strictly numbered entry snapshots."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError
from app.models.entry import EntryRevision
from app.models.user import User
from app.schemas.tag import TagBase
from app.services import tag_service

logger = logging.getLogger(__name__)

T = TypeVar("T")

REVISION_NUMBER_CONSTRAINT = "uq_entry_revision_number"


class RevisionNumberTaken(Exception):
    """A concurrent writer committed the same (entry_id, revision_number) first."""

    def __init__(self, entry_id: int, revision_number: int):
        self.entry_id = entry_id
        self.revision_number = revision_number
        super().__init__(f"revision {revision_number} of entry {entry_id} already exists")


def _is_numbering_collision(exc: IntegrityError) -> bool:
    # postgres names the constraint, sqlite lists its columns
    message = str(exc.orig)
    if REVISION_NUMBER_CONSTRAINT in message:
        return True
    return "UNIQUE" in message and "entry_revision.revision_number" in message


def next_revision_number(db: Session, entry_id: int) -> int:
    current_max = (
        db.query(func.max(EntryRevision.revision_number))
        .filter(EntryRevision.entry_id == entry_id)
        .scalar()
    )
    return (current_max or 0) + 1


def append_revision(
    db: Session,
    *,
    entry_id: int,
    title: str,
    content: str,
    tags: Sequence[TagBase],
    creator_id: int,
) -> EntryRevision:
    """Insert the next revision of ``entry_id`` and link its tags.

    Runs inside the caller's transaction and never commits. Callers flush their
    own pending rows first. A violation of the per-entry numbering constraint on
    this flush is reported as :class:`RevisionNumberTaken`; any other integrity
    failure propagates unchanged.
    """
    revision_number = next_revision_number(db, entry_id)
    revision = EntryRevision(
        entry_id=entry_id,
        title=title,
        content=content,
        revision_number=revision_number,
        creator_id=creator_id,
    )
    db.add(revision)
    try:
        db.flush()
    except IntegrityError as exc:
        if not _is_numbering_collision(exc):
            raise
        raise RevisionNumberTaken(entry_id, revision_number) from exc
    tag_service.attach_tags_to_revision(db, revision.id, tags)
    return revision


def run_with_revision_retry(db: Session, work: Callable[[], T]) -> T:
    """Run ``work`` in a transaction, retrying from scratch on revision-number collisions."""
    attempts = max(1, int(settings.REVISION_INSERT_MAX_RETRIES))
    for attempt in range(1, attempts + 1):
        try:
            result = work()
            db.commit()
            return result
        except RevisionNumberTaken as exc:
            db.rollback()
            logger.warning(
                "Revision number collision on entry %s (attempt %s/%s)",
                exc.entry_id, attempt, attempts,
            )
        except Exception:
            db.rollback()
            raise
    raise ConflictError("Entry was modified concurrently, please retry")


def current_revision(db: Session, entry_id: int) -> Optional[EntryRevision]:
    return (
        db.query(EntryRevision)
        .filter(EntryRevision.entry_id == entry_id)
        .order_by(EntryRevision.revision_number.desc(), EntryRevision.id.desc())
        .first()
    )


def current_revisions_subquery(db: Session):
    """One row per entry: the id of its highest-numbered revision (ties by highest id)."""
    ranked = (
        db.query(
            EntryRevision.id.label("revision_id"),
            EntryRevision.entry_id.label("entry_id"),
            func.row_number()
            .over(
                partition_by=EntryRevision.entry_id,
                order_by=(EntryRevision.revision_number.desc(), EntryRevision.id.desc()),
            )
            .label("rank"),
        )
        .subquery()
    )
    return (
        db.query(ranked.c.entry_id, ranked.c.revision_id)
        .filter(ranked.c.rank == 1)
        .subquery()
    )


def list_revisions(db: Session, entry_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(EntryRevision, User.username)
        .join(User, User.user_id == EntryRevision.creator_id)
        .filter(EntryRevision.entry_id == entry_id)
        .order_by(EntryRevision.revision_number.desc(), EntryRevision.id.desc())
        .all()
    )
    tags = tag_service.tags_for_revisions(db, [row.id for row, _ in rows])
    return [to_response(row, username, tags.get(row.id, [])) for row, username in rows]


def get_revision(db: Session, entry_id: int, revision_number: int) -> Optional[Dict[str, Any]]:
    row = (
        db.query(EntryRevision, User.username)
        .join(User, User.user_id == EntryRevision.creator_id)
        .filter(
            EntryRevision.entry_id == entry_id,
            EntryRevision.revision_number == revision_number,
        )
        .order_by(EntryRevision.id.desc())
        .first()
    )
    if not row:
        return None
    revision, username = row
    tags = tag_service.tags_for_revisions(db, [revision.id])
    return to_response(revision, username, tags[revision.id])


def to_response(row: EntryRevision, username: Optional[str], tags) -> Dict[str, Any]:
    return {
        "id": row.id,
        "entry_id": row.entry_id,
        "title": row.title,
        "content": row.content,
        "revision_number": row.revision_number,
        "creator_id": row.creator_id,
        "username": username,
        "date_created": row.date_created,
        "tags": [{"name": tag.name, "classification": tag.classification} for tag in tags],
    }
