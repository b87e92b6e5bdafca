from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.core.exceptions import ResourceNotFoundError, ValidationError
from trainsched.models.assignment import Draft, Schedule
from trainsched.schemas.assignment import DraftCreate, DraftUpdate
from trainsched.services.conflict_service import commit_or_conflict, ensure_no_conflict
from trainsched.services.references import ensure_valid_id, get_trainer, get_trainer_by_name, resolve_assignment

logger = logging.getLogger(__name__)


def list_drafts(db: Session) -> list[Draft]:
    return list(db.execute(select(Draft).order_by(Draft.day_id, Draft.slot_id, Draft.created_at)).scalars())


def get_draft(db: Session, draft_id: str) -> Draft:
    ensure_valid_id(draft_id, "draft")
    draft = db.get(Draft, draft_id)
    if draft is None:
        raise ResourceNotFoundError("Draft", draft_id)
    return draft


def create_draft(db: Session, payload: DraftCreate) -> Draft:
    trainer = get_trainer_by_name(db, payload.trainer_name)
    resolved = resolve_assignment(
        db,
        trainer=trainer,
        room=payload.room,
        group_name=payload.group_name,
        track_id=payload.track_id,
        day_id=payload.day_id,
        slot_id=payload.slot_id,
        module_name=payload.module_name,
        module_trainer_id=payload.module_trainer_id,
    )
    proposal = resolved.proposal()
    ensure_no_conflict(db, (Draft, Schedule), proposal)

    draft = Draft()
    resolved.apply_to(draft)
    db.add(draft)
    commit_or_conflict(db, (Draft,), proposal)
    db.refresh(draft)
    logger.info(
        "DRAFT CREATED | id=%s | trainer=%s | room=%s | group=%s | day=%s | slot=%s",
        draft.id,
        draft.trainer_name,
        draft.room,
        draft.group_name,
        draft.day_id,
        draft.slot_id,
    )
    return draft


def update_draft(db: Session, draft_id: str, payload: DraftUpdate) -> Draft:
    draft = get_draft(db, draft_id)
    trainer = get_trainer(db, payload.trainer_id)
    if payload.trainer_name and payload.trainer_name != trainer.name:
        raise ValidationError(
            "trainerName does not match trainerId",
            details={"trainerId": payload.trainer_id, "trainerName": payload.trainer_name},
        )
    resolved = resolve_assignment(
        db,
        trainer=trainer,
        room=payload.room,
        group_name=payload.group_name,
        track_id=payload.track_id,
        day_id=payload.day_id,
        slot_id=payload.slot_id,
        module_name=payload.module_name,
        module_trainer_id=payload.module_trainer_id,
    )
    proposal = resolved.proposal()
    ensure_no_conflict(db, (Draft, Schedule), proposal, exclude_ids={draft.id})

    resolved.apply_to(draft)
    commit_or_conflict(db, (Draft,), proposal, exclude_ids={draft_id})
    db.refresh(draft)
    logger.info("DRAFT UPDATED | id=%s | day=%s | slot=%s", draft.id, draft.day_id, draft.slot_id)
    return draft


def delete_draft(db: Session, draft_id: str) -> None:
    draft = get_draft(db, draft_id)
    db.delete(draft)
    db.commit()
    logger.info("DRAFT DELETED | id=%s", draft_id)
