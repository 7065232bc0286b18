"""Entries API router. Validates requests and delegates to the service layer."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.comment import CommentOut
from app.schemas.entry import (
    BoundsQuery,
    EntryCreate,
    EntryCreated,
    EntryOut,
    EntrySummaryOut,
    EntryUpdate,
    RevisionOut,
)
from app.schemas.interaction import VoteRequest, VoteResult
from app.services import comment_service, entry_service, interaction_service
from app.middleware.auth_middleware import get_current_user, get_optional_user
from app.models.interaction import TargetKind
from app.models.user import User

router = APIRouter(prefix="/api/entries", tags=["entries"])


@router.post("", response_model=EntryCreated, status_code=status.HTTP_201_CREATED)
def create_entry(
    data: EntryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return entry_service.create_entry(db, data, current_user)


@router.post("/bounds", response_model=List[EntrySummaryOut])
def entries_in_bounds(data: BoundsQuery, db: Session = Depends(get_db)):
    entries = entry_service.list_entries_in_bounds(db, data)
    if not entries:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return entries


@router.get("/feed", response_model=List[EntrySummaryOut])
def feed(
    location: str = Query(..., min_length=1),
    distance: float = Query(...),
    db: Session = Depends(get_db),
):
    entries = entry_service.get_feed(db, location, distance)
    if not entries:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return entries


@router.get("/{entry_id}", response_model=EntryOut)
def get_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return entry_service.get_entry(db, entry_id, viewer)


@router.put("/{entry_id}", response_model=RevisionOut)
def edit_entry(
    entry_id: int,
    data: EntryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return entry_service.edit_entry(db, entry_id, data, current_user)


@router.get("/{entry_id}/revisions", response_model=List[RevisionOut])
def list_revisions(entry_id: int, db: Session = Depends(get_db)):
    return entry_service.list_revisions(db, entry_id)


@router.get("/{entry_id}/revisions/{revision_number}", response_model=RevisionOut)
def get_revision(entry_id: int, revision_number: int, db: Session = Depends(get_db)):
    return entry_service.get_revision(db, entry_id, revision_number)


@router.post("/{entry_id}/vote", response_model=VoteResult)
def vote_on_entry(
    entry_id: int,
    data: VoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return interaction_service.vote(
        db,
        user_id=current_user.user_id,
        kind=TargetKind.ENTRY,
        target_id=entry_id,
        requested=data.interaction_type,
    )


@router.get("/{entry_id}/comments", response_model=List[CommentOut])
def list_comments(
    entry_id: int,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user),
):
    return comment_service.list_top_level(db, entry_id, viewer)
