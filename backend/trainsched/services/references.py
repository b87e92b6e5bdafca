"""Resolution of the externally owned records an assignment points at."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.core.exceptions import NamedResourceNotFoundError, ResourceNotFoundError, ValidationError
from trainsched.core.slot_grid import validate_coordinate
from trainsched.models.assignment import AssignmentMixin
from trainsched.models.establishment import Establishment
from trainsched.models.track import Track
from trainsched.models.trainer import Trainer
from trainsched.services.conflict_service import SlotProposal


def is_valid_id(value: str | None) -> bool:
    if not value:
        return False
    try:
        return str(uuid.UUID(value)) == value.lower()
    except (ValueError, AttributeError, TypeError):
        return False


def ensure_valid_id(value: str | None, label: str) -> str:
    if not is_valid_id(value):
        raise ValidationError(f"Invalid {label} id: {value}", details={"field": label, "value": value})
    return value


def get_trainer(db: Session, trainer_id: str) -> Trainer:
    ensure_valid_id(trainer_id, "trainer")
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise ResourceNotFoundError("Trainer", trainer_id)
    return trainer


def get_trainer_by_name(db: Session, name: str) -> Trainer:
    trainer = db.execute(select(Trainer).where(Trainer.name == name)).scalar_one_or_none()
    if trainer is None:
        raise NamedResourceNotFoundError("Trainer", name)
    return trainer


def get_track(db: Session, track_id: str) -> Track:
    ensure_valid_id(track_id, "track")
    track = db.get(Track, track_id)
    if track is None:
        raise ResourceNotFoundError("Track", track_id)
    return track


def find_establishment_for_room(db: Session, room: str) -> Establishment:
    # Room lists are JSON arrays, matched in Python.
    for establishment in db.execute(select(Establishment).order_by(Establishment.created_at)).scalars():
        if room in (establishment.rooms or []):
            return establishment
    raise NamedResourceNotFoundError("Room", room)


@dataclass
class ResolvedAssignment:
    trainer: Trainer
    room: str
    group_name: str
    track: Track
    day_id: int
    slot_id: int
    module_name: str | None = None
    module_trainer: Trainer | None = None

    def proposal(self) -> SlotProposal:
        return SlotProposal(
            day_id=self.day_id,
            slot_id=self.slot_id,
            trainer_id=self.trainer.id,
            room=self.room,
            group_name=self.group_name,
        )

    def apply_to(self, record: AssignmentMixin) -> None:
        record.trainer_id = self.trainer.id
        record.trainer_name = self.trainer.name
        record.room = self.room
        record.group_name = self.group_name
        record.track_id = self.track.id
        record.track_name = self.track.name
        record.day_id = self.day_id
        record.slot_id = self.slot_id
        record.module_name = self.module_name
        if self.module_name:
            record.module_trainer_id = self.module_trainer.id
            record.module_trainer_name = self.module_trainer.name
        else:
            record.module_trainer_id = None
            record.module_trainer_name = None


def resolve_assignment(
    db: Session,
    *,
    trainer: Trainer,
    room: str,
    group_name: str,
    track_id: str,
    day_id: int,
    slot_id: int,
    module_name: str | None = None,
    module_trainer_id: str | None = None,
) -> ResolvedAssignment:
    """Validate every reference of a proposed assignment, in request order.

    Raises ValidationError/InvalidSlotError for malformed input and
    ResourceNotFoundError/NamedResourceNotFoundError for missing records.
    """
    validate_coordinate(day_id, slot_id)
    find_establishment_for_room(db, room)
    track = get_track(db, track_id)

    if group_name not in track.group_names():
        raise ValidationError(
            f'Group "{group_name}" does not belong to track {track.name}',
            details={"field": "groupName", "value": group_name},
        )

    module_trainer: Trainer | None = None
    if module_name:
        if module_name not in track.module_names():
            raise ValidationError(
                f'Module "{module_name}" does not belong to track {track.name}',
                details={"field": "moduleName", "value": module_name},
            )
        module_trainer = get_trainer(db, module_trainer_id) if module_trainer_id else trainer
    elif module_trainer_id:
        raise ValidationError("moduleTrainerId requires moduleName", details={"field": "moduleTrainerId"})

    return ResolvedAssignment(
        trainer=trainer,
        room=room,
        group_name=group_name,
        track=track,
        day_id=day_id,
        slot_id=slot_id,
        module_name=module_name or None,
        module_trainer=module_trainer,
    )


def draft_reference_problem(db: Session, record: AssignmentMixin) -> str | None:
    """Describe the first broken reference of a stored assignment, if any."""
    if not is_valid_id(record.trainer_id):
        return f"Invalid trainer id for draft {record.id}"
    if not is_valid_id(record.track_id):
        return f"Invalid track id for draft {record.id}"
    if record.module_trainer_id and not is_valid_id(record.module_trainer_id):
        return f"Invalid module trainer id for draft {record.id}"
    if not record.room or not record.group_name or not record.day_id or not record.slot_id:
        return f"Missing required fields for draft {record.id}"

    if db.get(Trainer, record.trainer_id) is None:
        return f"Trainer {record.trainer_id} referenced by draft {record.id} no longer exists"
    if db.get(Track, record.track_id) is None:
        return f"Track {record.track_id} referenced by draft {record.id} no longer exists"
    if record.module_trainer_id and db.get(Trainer, record.module_trainer_id) is None:
        return f"Module trainer {record.module_trainer_id} referenced by draft {record.id} no longer exists"
    return None
