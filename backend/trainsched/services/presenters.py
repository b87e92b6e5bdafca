"""Display projections of drafts, schedules and history snapshots."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.core.slot_grid import day_name, is_valid_day, is_valid_slot, time_window
from trainsched.models.assignment import AssignmentMixin
from trainsched.models.track import Track
from trainsched.models.trainer import Trainer
from trainsched.schemas.assignment import AssignmentOut, ModuleOut, ReferenceOut

logger = logging.getLogger(__name__)


def _load_by_id(db: Session, model, ids: Iterable[str]) -> dict:
    wanted = {item for item in ids if item}
    if not wanted:
        return {}
    return {row.id: row for row in db.execute(select(model).where(model.id.in_(wanted))).scalars()}


def present_assignments(db: Session, records: Sequence[AssignmentMixin]) -> list[AssignmentOut]:
    """Project records for display, skipping those whose trainer or track is gone."""
    trainers = _load_by_id(
        db,
        Trainer,
        [record.trainer_id for record in records] + [record.module_trainer_id for record in records],
    )
    tracks = _load_by_id(db, Track, [record.track_id for record in records])

    items: list[AssignmentOut] = []
    for record in records:
        item = _present(record, trainers, tracks)
        if item is None:
            logger.debug("Skipping %s with dangling reference | id=%s", type(record).__name__, record.id)
            continue
        items.append(item)
    return items


def present_assignment(db: Session, record: AssignmentMixin) -> AssignmentOut:
    items = present_assignments(db, [record])
    if items:
        return items[0]
    # Single reads fall back to the cached names instead of hiding the record.
    return _present_cached(record)


def _present(record: AssignmentMixin, trainers: dict, tracks: dict) -> AssignmentOut | None:
    trainer = trainers.get(record.trainer_id)
    track = tracks.get(record.track_id)
    if trainer is None or track is None:
        return None
    if not is_valid_day(record.day_id) or not is_valid_slot(record.slot_id):
        return None

    module = None
    if record.module_name:
        module_trainer = trainers.get(record.module_trainer_id)
        module = ModuleOut(
            name=record.module_name,
            trainer=ReferenceOut(id=module_trainer.id, name=module_trainer.name) if module_trainer else None,
        )
    window = time_window(record.slot_id)
    return AssignmentOut(
        id=record.id,
        trainer=ReferenceOut(id=trainer.id, name=trainer.name),
        room=record.room,
        group=record.group_name,
        track=ReferenceOut(id=track.id, name=track.name),
        day_id=record.day_id,
        day=day_name(record.day_id),
        slot_id=record.slot_id,
        start_time=window.start,
        end_time=window.end,
        module=module,
    )


def _present_cached(record: AssignmentMixin) -> AssignmentOut:
    window = time_window(record.slot_id)
    module = None
    if record.module_name:
        module_trainer = None
        if record.module_trainer_id:
            module_trainer = ReferenceOut(id=record.module_trainer_id, name=record.module_trainer_name or "N/A")
        module = ModuleOut(name=record.module_name, trainer=module_trainer)
    return AssignmentOut(
        id=record.id,
        trainer=ReferenceOut(id=record.trainer_id, name=record.trainer_name or "N/A"),
        room=record.room,
        group=record.group_name,
        track=ReferenceOut(id=record.track_id, name=record.track_name or "N/A"),
        day_id=record.day_id,
        day=day_name(record.day_id),
        slot_id=record.slot_id,
        start_time=window.start,
        end_time=window.end,
        module=module,
    )


def snapshot_entry(item: AssignmentOut) -> dict:
    """Denormalized copy stored inside a history entry."""
    return {
        "id": item.id,
        "schedule_id": item.id,
        "trainer": {"id": item.trainer.id, "name": item.trainer.name},
        "room": item.room,
        "group": item.group,
        "track": {"id": item.track.id, "name": item.track.name},
        "day": item.day,
        "slot": item.slot_id,
        "module": item.module.model_dump() if item.module is not None else None,
    }
