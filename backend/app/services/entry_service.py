"""Entry store service: geolocated entries, spatial queries and edits via the revision chain."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.entry import Entry, EntryRevision
from app.models.interaction import TargetKind
from app.models.user import User
from app.schemas.entry import BoundsQuery, EntryCreate, EntryUpdate
from app.services import city_service, interaction_service, revision_service, tag_service
from app.utils import geo

logger = logging.getLogger(__name__)


def _require_text(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", details={"fields": missing})


def _longitude_filter(west: float, east: float):
    if west <= east:
        return Entry.longitude.between(west, east)
    # box crosses the antimeridian
    return or_(Entry.longitude >= west, Entry.longitude <= east)


def _get_entry_or_404(db: Session, entry_id: int) -> Entry:
    entry = db.query(Entry).filter(Entry.id == entry_id).first()
    if not entry:
        raise NotFoundError("Entry", entry_id, message="Entry not found")
    return entry


def find_entries_within(
    db: Session, longitude: float, latitude: float, radius_meters: float
) -> List[Tuple[Entry, float]]:
    """Entries within ``radius_meters`` (geodesic) of the point, nearest first."""
    west, south, east, north = geo.bounding_box(longitude, latitude, radius_meters)
    candidates = (
        db.query(Entry)
        .filter(Entry.latitude.between(south, north), _longitude_filter(west, east))
        .all()
    )
    hits = []
    for entry in candidates:
        distance = geo.haversine_meters(longitude, latitude, entry.longitude, entry.latitude)
        if distance <= radius_meters:
            hits.append((entry, distance))
    hits.sort(key=lambda hit: hit[1])
    return hits


def create_entry(db: Session, data: EntryCreate, creator: User) -> Dict[str, int]:
    _require_text(title=data.title, address=data.address, description=data.description)
    if not geo.validate_coordinates(data.longitude, data.latitude):
        raise ValidationError(
            "Coordinates out of range",
            details={"longitude": data.longitude, "latitude": data.latitude},
        )
    tags = tag_service.normalize_tags(data.tags)

    def work() -> Tuple[int, int, int]:
        duplicates = find_entries_within(
            db, data.longitude, data.latitude, settings.DUPLICATE_ENTRY_RADIUS_METERS
        )
        if duplicates:
            existing, distance = duplicates[0]
            raise ConflictError(
                "Entry already exists in this location",
                details={"entry_id": existing.id, "distance_meters": round(distance, 1)},
            )
        entry = Entry(
            address=data.address.strip(),
            creator_id=creator.user_id,
            longitude=data.longitude,
            latitude=data.latitude,
            views=0,
        )
        db.add(entry)
        db.flush()
        revision = revision_service.append_revision(
            db,
            entry_id=entry.id,
            title=data.title.strip(),
            content=data.description,
            tags=tags,
            creator_id=creator.user_id,
        )
        return entry.id, revision.id, revision.revision_number

    entry_id, revision_id, revision_number = revision_service.run_with_revision_retry(db, work)
    logger.info("Entry %s created by %s at (%s, %s)", entry_id, creator.username, data.longitude, data.latitude)
    return {"entry_id": entry_id, "revision_id": revision_id, "revision_number": revision_number}


def edit_entry(db: Session, entry_id: int, data: EntryUpdate, editor: User) -> Dict[str, Any]:
    _require_text(title=data.title, content=data.content)
    tags = tag_service.normalize_tags(data.tags)

    def work() -> int:
        _get_entry_or_404(db, entry_id)
        revision = revision_service.append_revision(
            db,
            entry_id=entry_id,
            title=data.title.strip(),
            content=data.content,
            tags=tags,
            creator_id=editor.user_id,
        )
        return revision.revision_number

    revision_number = revision_service.run_with_revision_retry(db, work)
    logger.info("Entry %s revised to #%s by %s", entry_id, revision_number, editor.username)
    return revision_service.get_revision(db, entry_id, revision_number)


def get_entry(db: Session, entry_id: int, viewer: Optional[User] = None) -> Dict[str, Any]:
    entry = _get_entry_or_404(db, entry_id)
    revision = revision_service.current_revision(db, entry_id)
    if revision is None:
        raise NotFoundError("Entry", entry_id, message="Entry not found")

    tags = tag_service.tags_for_revisions(db, [revision.id])[revision.id]
    upvotes, downvotes = interaction_service.get_aggregate(db, TargetKind.ENTRY, entry.id)
    user_interaction = interaction_service.get_user_state(
        db, viewer.user_id if viewer else None, TargetKind.ENTRY, entry.id
    )
    number_of_comments = _comment_counts(db, [entry.id])[entry.id]

    payload = _serialize_summary(entry, revision, entry.creator, upvotes, downvotes, number_of_comments)
    payload.update(
        {
            "revision_id": revision.id,
            "revision_number": revision.revision_number,
            "tags": [{"name": tag.name, "classification": tag.classification} for tag in tags],
            "user_interaction": user_interaction,
        }
    )
    return payload


def list_entries_in_bounds(db: Session, bounds: BoundsQuery) -> List[Dict[str, Any]]:
    if bounds.south > bounds.north:
        raise ValidationError("south must not exceed north", details=bounds.model_dump())
    rows = (
        _entries_with_current_revision(db)
        .filter(
            Entry.latitude.between(bounds.south, bounds.north),
            _longitude_filter(bounds.west, bounds.east),
        )
        .order_by(Entry.date_created.desc(), Entry.id.desc())
        .all()
    )
    return _serialize_summaries(db, rows)


def get_feed(db: Session, location: str, distance: float) -> List[Dict[str, Any]]:
    if distance is None or distance <= 0:
        raise ValidationError("distance must be a positive number of miles", details={"distance": distance})
    city = city_service.find_city(location)
    longitude, latitude = float(city["lng"]), float(city["lat"])
    radius_meters = geo.miles_to_meters(distance)

    west, south, east, north = geo.bounding_box(longitude, latitude, radius_meters)
    candidates = (
        _entries_with_current_revision(db)
        .filter(Entry.latitude.between(south, north), _longitude_filter(west, east))
        .order_by(Entry.date_created.desc(), Entry.id.desc())
        .all()
    )
    rows = [
        row for row in candidates
        if geo.haversine_meters(longitude, latitude, row[0].longitude, row[0].latitude) <= radius_meters
    ]
    return _serialize_summaries(db, rows)


def list_revisions(db: Session, entry_id: int) -> List[Dict[str, Any]]:
    _get_entry_or_404(db, entry_id)
    return revision_service.list_revisions(db, entry_id)


def get_revision(db: Session, entry_id: int, revision_number: int) -> Dict[str, Any]:
    _get_entry_or_404(db, entry_id)
    revision = revision_service.get_revision(db, entry_id, revision_number)
    if revision is None:
        raise NotFoundError("Revision", revision_number, message="Revision not found")
    return revision


def _entries_with_current_revision(db: Session):
    current = revision_service.current_revisions_subquery(db)
    return (
        db.query(Entry, EntryRevision, User)
        .join(current, current.c.entry_id == Entry.id)
        .join(EntryRevision, EntryRevision.id == current.c.revision_id)
        .join(User, User.user_id == Entry.creator_id)
    )


def _comment_counts(db: Session, entry_ids: List[int]) -> Dict[int, int]:
    counts = {int(entry_id): 0 for entry_id in entry_ids}
    if not entry_ids:
        return counts
    rows = (
        db.query(Comment.entry_id, func.count(Comment.id))
        .filter(Comment.entry_id.in_(entry_ids))
        .group_by(Comment.entry_id)
        .all()
    )
    for entry_id, count in rows:
        counts[int(entry_id)] = int(count)
    return counts


def _serialize_summary(
    entry: Entry,
    revision: EntryRevision,
    creator: User,
    upvotes: int,
    downvotes: int,
    number_of_comments: int,
) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "title": revision.title,
        "address": entry.address,
        "content": revision.content,
        "views": int(entry.views or 0),
        "date_created": entry.date_created,
        "username": creator.username,
        "first_name": creator.first_name or "",
        "last_name": creator.last_name or "",
        "longitude": entry.longitude,
        "latitude": entry.latitude,
        "upvotes": upvotes,
        "downvotes": downvotes,
        "number_of_comments": number_of_comments,
    }


def _serialize_summaries(db: Session, rows) -> List[Dict[str, Any]]:
    entry_ids = [entry.id for entry, _revision, _creator in rows]
    votes = interaction_service.get_aggregates(db, TargetKind.ENTRY, entry_ids)
    comments = _comment_counts(db, entry_ids)
    result = []
    for entry, revision, creator in rows:
        upvotes, downvotes = votes[entry.id]
        result.append(_serialize_summary(entry, revision, creator, upvotes, downvotes, comments[entry.id]))
    return result
