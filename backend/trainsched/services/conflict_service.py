"""Slot collision rules shared by drafts, schedules and confirmation.

Two assignments collide when they sit on the same (day, slot) coordinate
and agree on the trainer, the room or the group name. Each agreeing
dimension is reported separately so callers can tell which one clashed.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from trainsched.core.exceptions import ConflictError
from trainsched.core.slot_grid import day_name, time_window, validate_coordinate
from trainsched.models.assignment import AssignmentMixin, Draft, Schedule

COLLECTION_LABELS: dict[type, str] = {Draft: "draft", Schedule: "schedule"}


class ConflictReason(str, Enum):
    trainer = "trainer"
    room = "room"
    group = "group"


@dataclass(frozen=True)
class SlotProposal:
    day_id: int
    slot_id: int
    trainer_id: str | None = None
    room: str | None = None
    group_name: str | None = None

    @classmethod
    def from_record(cls, record: AssignmentMixin) -> "SlotProposal":
        return cls(
            day_id=record.day_id,
            slot_id=record.slot_id,
            trainer_id=record.trainer_id,
            room=record.room,
            group_name=record.group_name,
        )


@dataclass(frozen=True)
class ConflictHit:
    reason: ConflictReason
    collection: str
    record_id: str


def collision_reasons(record: AssignmentMixin, proposal: SlotProposal) -> list[ConflictReason]:
    if record.day_id != proposal.day_id or record.slot_id != proposal.slot_id:
        return []
    reasons: list[ConflictReason] = []
    if proposal.trainer_id and record.trainer_id == proposal.trainer_id:
        reasons.append(ConflictReason.trainer)
    if proposal.room and record.room == proposal.room:
        reasons.append(ConflictReason.room)
    if proposal.group_name and record.group_name == proposal.group_name:
        reasons.append(ConflictReason.group)
    return reasons


def find_conflicts(
    db: Session,
    models: Sequence[type[AssignmentMixin]],
    proposal: SlotProposal,
    exclude_ids: Collection[str] = (),
) -> list[ConflictHit]:
    """Return every collision between the proposal and rows of the given tables.

    Absent proposal fields are not checked, which lets read-only
    availability queries ask about a single room or trainer.
    """
    validate_coordinate(proposal.day_id, proposal.slot_id)
    hits: list[ConflictHit] = []
    for model in models:
        criteria = []
        if proposal.trainer_id:
            criteria.append(model.trainer_id == proposal.trainer_id)
        if proposal.room:
            criteria.append(model.room == proposal.room)
        if proposal.group_name:
            criteria.append(model.group_name == proposal.group_name)
        if not criteria:
            continue

        statement = (
            select(model)
            .where(model.day_id == proposal.day_id, model.slot_id == proposal.slot_id, or_(*criteria))
            .order_by(model.created_at, model.id)
        )
        if exclude_ids:
            statement = statement.where(model.id.not_in(list(exclude_ids)))

        for record in db.execute(statement).scalars():
            for reason in collision_reasons(record, proposal):
                hits.append(ConflictHit(reason=reason, collection=COLLECTION_LABELS[model], record_id=record.id))
    return hits


def has_conflict(
    db: Session,
    models: Sequence[type[AssignmentMixin]],
    proposal: SlotProposal,
    exclude_ids: Collection[str] = (),
) -> bool:
    return bool(find_conflicts(db, models, proposal, exclude_ids))


def conflict_reasons(hits: Iterable[ConflictHit]) -> list[str]:
    seen: list[str] = []
    for hit in hits:
        if hit.reason.value not in seen:
            seen.append(hit.reason.value)
    return seen


def build_conflict_error(proposal: SlotProposal, hits: Sequence[ConflictHit]) -> ConflictError:
    reasons = conflict_reasons(hits)
    window = time_window(proposal.slot_id)
    return ConflictError(
        (
            f"Scheduling conflict on {day_name(proposal.day_id)} {window.label}: "
            f"{', '.join(reasons) or 'trainer, room or group'} already booked"
        ),
        details={
            "reasons": reasons,
            "conflicts": [
                {"reason": hit.reason.value, "collection": hit.collection, "record_id": hit.record_id}
                for hit in hits
            ],
        },
    )


def ensure_no_conflict(
    db: Session,
    models: Sequence[type[AssignmentMixin]],
    proposal: SlotProposal,
    exclude_ids: Collection[str] = (),
) -> None:
    hits = find_conflicts(db, models, proposal, exclude_ids)
    if hits:
        raise build_conflict_error(proposal, hits)


def storage_conflict_error(
    db: Session,
    models: Sequence[type[AssignmentMixin]],
    proposal: SlotProposal,
    exc: IntegrityError,
    exclude_ids: Collection[str] = (),
) -> ConflictError:
    """Describe a uniqueness violation from the rows that now hold the slot.

    Call after the failed transaction was rolled back.
    """
    error = build_conflict_error(proposal, find_conflicts(db, models, proposal, exclude_ids))
    error.details["storage_error"] = str(exc.orig)
    return error


def commit_or_conflict(
    db: Session,
    models: Sequence[type[AssignmentMixin]],
    proposal: SlotProposal,
    exclude_ids: Collection[str] = (),
) -> None:
    """Commit, translating a uniqueness violation into a ConflictError.

    The storage constraints are the final arbiter when two writers pass
    the pre-check concurrently.
    """
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise storage_conflict_error(db, models, proposal, exc, exclude_ids) from exc
