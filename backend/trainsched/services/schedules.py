from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.core.exceptions import ResourceNotFoundError
from trainsched.models.assignment import Schedule
from trainsched.schemas.assignment import ScheduleCreate, ScheduleUpdate
from trainsched.services.conflict_service import commit_or_conflict, ensure_no_conflict
from trainsched.services.references import ensure_valid_id, get_trainer, get_trainer_by_name, resolve_assignment

logger = logging.getLogger(__name__)


def list_schedules(db: Session, trainer_id: str | None = None) -> list[Schedule]:
    statement = select(Schedule).order_by(Schedule.day_id, Schedule.slot_id, Schedule.created_at)
    if trainer_id:
        statement = statement.where(Schedule.trainer_id == trainer_id)
    return list(db.execute(statement).scalars())


def get_schedule(db: Session, schedule_id: str) -> Schedule:
    ensure_valid_id(schedule_id, "schedule")
    schedule = db.get(Schedule, schedule_id)
    if schedule is None:
        raise ResourceNotFoundError("Schedule", schedule_id)
    return schedule


def create_schedule(db: Session, payload: ScheduleCreate) -> Schedule:
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
    ensure_no_conflict(db, (Schedule,), proposal)

    schedule = Schedule()
    resolved.apply_to(schedule)
    db.add(schedule)
    commit_or_conflict(db, (Schedule,), proposal)
    db.refresh(schedule)
    logger.info("SCHEDULE CREATED | id=%s | day=%s | slot=%s", schedule.id, schedule.day_id, schedule.slot_id)
    return schedule


def update_schedule(db: Session, schedule_id: str, payload: ScheduleUpdate) -> Schedule:
    schedule = get_schedule(db, schedule_id)
    data = payload.model_dump(exclude_unset=True)

    trainer_changed = bool(data.get("trainer_name"))
    trainer = get_trainer_by_name(db, data["trainer_name"]) if trainer_changed else get_trainer(db, schedule.trainer_id)
    module_name = data.get("module_name", schedule.module_name)
    keep_module_trainer = not trainer_changed and module_name == schedule.module_name

    resolved = resolve_assignment(
        db,
        trainer=trainer,
        room=data.get("room") or schedule.room,
        group_name=data.get("group_name") or schedule.group_name,
        track_id=data.get("track_id") or schedule.track_id,
        day_id=data.get("day_id") or schedule.day_id,
        slot_id=data.get("slot_id") or schedule.slot_id,
        module_name=module_name,
        module_trainer_id=schedule.module_trainer_id if keep_module_trainer and module_name else None,
    )
    proposal = resolved.proposal()
    ensure_no_conflict(db, (Schedule,), proposal, exclude_ids={schedule.id})

    resolved.apply_to(schedule)
    commit_or_conflict(db, (Schedule,), proposal, exclude_ids={schedule_id})
    db.refresh(schedule)
    logger.info("SCHEDULE UPDATED | id=%s | day=%s | slot=%s", schedule.id, schedule.day_id, schedule.slot_id)
    return schedule


def delete_schedule(db: Session, schedule_id: str) -> None:
    schedule = get_schedule(db, schedule_id)
    db.delete(schedule)
    db.commit()
    logger.info("SCHEDULE DELETED | id=%s", schedule_id)
