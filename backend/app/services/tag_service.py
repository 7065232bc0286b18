"""Tag registry service: atomic get-or-create of tags and revision associations."""

import logging
from typing import Iterable, List, Sequence

from sqlalchemy.orm import Session

from app.database import upsert_insert
from app.exceptions import ValidationError
from app.models.tag import Tag, TagAssociation
from app.schemas.tag import TagBase

logger = logging.getLogger(__name__)


def normalize_tags(tags: Iterable[TagBase] | None) -> List[TagBase]:
    """Strip names/classifications and drop repeated names, last classification wins."""
    by_name: dict[str, TagBase] = {}
    for tag in tags or []:
        name = (tag.name or "").strip()
        if not name:
            raise ValidationError("Tag name is required")
        by_name[name] = TagBase(name=name, classification=(tag.classification or "").strip())
    return list(by_name.values())


def resolve_tag(db: Session, name: str, classification: str) -> str:
    stmt = upsert_insert(db, Tag).values(name=name, classification=classification)
    stmt = stmt.on_conflict_do_update(
        index_elements=["name"],
        set_={"classification": stmt.excluded.classification},
    )
    db.execute(stmt)
    return name


def attach_tags_to_revision(db: Session, revision_id: int, tags: Sequence[TagBase]) -> List[str]:
    attached = []
    for tag in tags:
        tag_name = resolve_tag(db, tag.name, tag.classification)
        stmt = upsert_insert(db, TagAssociation).values(entry_revision_id=revision_id, tag_name=tag_name)
        db.execute(stmt.on_conflict_do_nothing())
        attached.append(tag_name)
    if attached:
        logger.debug("Attached tags %s to revision %s", attached, revision_id)
    return attached


def tags_for_revisions(db: Session, revision_ids: Sequence[int]) -> dict[int, List[Tag]]:
    result: dict[int, List[Tag]] = {int(rid): [] for rid in revision_ids}
    if not revision_ids:
        return result
    rows = (
        db.query(TagAssociation.entry_revision_id, Tag)
        .join(Tag, Tag.name == TagAssociation.tag_name)
        .filter(TagAssociation.entry_revision_id.in_(list(revision_ids)))
        .order_by(Tag.name.asc())
        .all()
    )
    for revision_id, tag in rows:
        result[int(revision_id)].append(tag)
    return result


def list_tags(db: Session) -> List[Tag]:
    return db.query(Tag).order_by(Tag.name.asc()).all()
