"""Interaction ledger: one active up/down vote per (user, target) for entries and comments.

Each :class:`TargetKind` is bound to its own ledger table here; SQL identifiers
are never assembled from request input. A vote is applied as a conditional
delete (same type repeated = toggle off) followed, when nothing was deleted, by
an atomic upsert keyed by the ledger's composite primary key (insert or switch).
"""

import logging
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import transaction, upsert_insert
from app.exceptions import NotFoundError, ValidationError
from app.models.comment import Comment
from app.models.entry import Entry
from app.models.interaction import (
    ConversationInteraction,
    EntryInteraction,
    InteractionType,
    TargetKind,
)

logger = logging.getLogger(__name__)


class Ledger(NamedTuple):
    model: type
    target_column: object
    target_model: type
    label: str


LEDGERS: Dict[TargetKind, Ledger] = {
    TargetKind.ENTRY: Ledger(EntryInteraction, EntryInteraction.entry_id, Entry, "Entry"),
    TargetKind.COMMENT: Ledger(ConversationInteraction, ConversationInteraction.conversation_id, Comment, "Comment"),
}


def _ledger(kind: TargetKind) -> Ledger:
    return LEDGERS[TargetKind(kind)]


def _coerce_type(requested) -> InteractionType:
    try:
        return InteractionType(requested)
    except ValueError:
        raise ValidationError(
            "interaction_type must be 'upvote' or 'downvote'",
            details={"interaction_type": str(requested)},
        ) from None


def ensure_target_exists(db: Session, kind: TargetKind, target_id: int) -> None:
    ledger = _ledger(kind)
    if not db.query(ledger.target_model.id).filter(ledger.target_model.id == target_id).first():
        raise NotFoundError(ledger.label, target_id, message=f"{ledger.label} not found")


def vote(db: Session, *, user_id: int, kind: TargetKind, target_id: int, requested) -> Dict[str, object]:
    kind = TargetKind(kind)
    ledger = _ledger(kind)
    interaction_type = _coerce_type(requested)
    ensure_target_exists(db, kind, target_id)

    with transaction(db):
        cleared = (
            db.query(ledger.model)
            .filter(
                ledger.target_column == target_id,
                ledger.model.user_id == user_id,
                ledger.model.interaction_type == interaction_type.value,
            )
            .delete(synchronize_session=False)
        )
        if not cleared:
            stmt = upsert_insert(db, ledger.model).values(
                {
                    ledger.target_column.key: target_id,
                    "user_id": user_id,
                    "interaction_type": interaction_type.value,
                }
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[ledger.target_column.key, "user_id"],
                set_={
                    "interaction_type": stmt.excluded.interaction_type,
                    "created_at": func.now(),
                },
            )
            db.execute(stmt)

    # re-read so the response reflects what is actually stored
    state = get_user_state(db, user_id, kind, target_id)
    upvotes, downvotes = get_aggregate(db, kind, target_id)
    logger.info(
        "Vote %s on %s %s by user %s -> %s",
        interaction_type.value, kind.value, target_id, user_id, state or "none",
    )
    return {"upvotes": upvotes, "downvotes": downvotes, "user_interaction": state}


def get_aggregate(db: Session, kind: TargetKind, target_id: int) -> Tuple[int, int]:
    return get_aggregates(db, kind, [target_id])[int(target_id)]


def get_aggregates(db: Session, kind: TargetKind, target_ids: Iterable[int]) -> Dict[int, Tuple[int, int]]:
    ids = [int(target_id) for target_id in target_ids]
    counts: Dict[int, Tuple[int, int]] = {target_id: (0, 0) for target_id in ids}
    if not ids:
        return counts
    ledger = _ledger(kind)
    rows = (
        db.query(ledger.target_column, ledger.model.interaction_type, func.count())
        .filter(ledger.target_column.in_(ids))
        .group_by(ledger.target_column, ledger.model.interaction_type)
        .all()
    )
    for target_id, interaction_type, count in rows:
        upvotes, downvotes = counts[int(target_id)]
        if interaction_type == InteractionType.UPVOTE.value:
            upvotes = int(count)
        elif interaction_type == InteractionType.DOWNVOTE.value:
            downvotes = int(count)
        counts[int(target_id)] = (upvotes, downvotes)
    return counts


def get_user_state(db: Session, user_id: Optional[int], kind: TargetKind, target_id: int) -> str:
    return get_user_states(db, user_id, kind, [target_id])[int(target_id)]


def get_user_states(
    db: Session, user_id: Optional[int], kind: TargetKind, target_ids: Iterable[int]
) -> Dict[int, str]:
    ids = [int(target_id) for target_id in target_ids]
    states = {target_id: "" for target_id in ids}
    if user_id is None or not ids:
        return states
    ledger = _ledger(kind)
    rows = (
        db.query(ledger.target_column, ledger.model.interaction_type)
        .filter(ledger.target_column.in_(ids), ledger.model.user_id == user_id)
        .all()
    )
    for target_id, interaction_type in rows:
        states[int(target_id)] = interaction_type
    return states
