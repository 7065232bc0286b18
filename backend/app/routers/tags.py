"""Tags API router."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.schemas.tag import TagOut
from app.services import tag_service

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("", response_model=List[TagOut])
def list_tags(db: Session = Depends(get_db)):
    tags = tag_service.list_tags(db)
    if not tags:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return tags
