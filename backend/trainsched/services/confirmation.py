"""Promotion of drafts into confirmed schedules.

confirm_draft is all-or-nothing: the schedule insert, the history entry
and the draft deletion share one transaction. confirm_all_drafts commits
draft by draft so that a single bad draft only costs its own row, then
records one snapshot of the whole schedule collection for the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from trainsched.core.exceptions import AppError, BrokenReferenceError
from trainsched.models.assignment import Draft, Schedule
from trainsched.models.schedule_history import HistoryAction
from trainsched.services.conflict_service import (
    SlotProposal,
    build_conflict_error,
    commit_or_conflict,
    conflict_reasons,
    find_conflicts,
    storage_conflict_error,
)
from trainsched.services.drafts import get_draft
from trainsched.services.history import record_history, utcnow
from trainsched.services.presenters import present_assignment, present_assignments, snapshot_entry
from trainsched.services.references import draft_reference_problem

logger = logging.getLogger(__name__)

HISTORY_WARNING = "History snapshot could not be recorded; the confirmed schedules are unaffected"


@dataclass
class DraftFailure:
    draft_id: str
    message: str
    reasons: list[str] = field(default_factory=list)


@dataclass
class ConfirmAllResult:
    schedules: list[Schedule] = field(default_factory=list)
    errors: list[DraftFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    created: int = 0
    updated: int = 0
    processed: int = 0
    confirmation_date: datetime | None = None

    @property
    def is_partial(self) -> bool:
        return bool(self.errors)


def confirm_draft(db: Session, draft_id: str, *, actor_id: str | None = None) -> Schedule:
    draft = get_draft(db, draft_id)
    problem = draft_reference_problem(db, draft)
    if problem:
        raise BrokenReferenceError(problem)

    proposal = SlotProposal.from_record(draft)
    # Drafts were checked against each other when written; only live schedules matter here.
    hits = find_conflicts(db, (Schedule,), proposal)
    if hits:
        raise build_conflict_error(proposal, hits)

    schedule = Schedule()
    schedule.copy_assignment_from(draft)
    db.add(schedule)
    try:
        db.flush()
        record_history(
            db,
            action=HistoryAction.CREATED,
            snapshot=[snapshot_entry(present_assignment(db, schedule))],
            confirmation_date=utcnow(),
            schedule_id=schedule.id,
            created_by_id=actor_id,
        )
        db.delete(draft)
        commit_or_conflict(db, (Schedule,), proposal)
    except IntegrityError as exc:
        db.rollback()
        raise storage_conflict_error(db, (Schedule,), proposal, exc) from exc
    except SQLAlchemyError:
        db.rollback()
        logger.exception("DRAFT CONFIRM FAILED | draft_id=%s", draft_id)
        raise

    db.refresh(schedule)
    logger.info("DRAFT CONFIRMED | draft_id=%s | schedule_id=%s", draft_id, schedule.id)
    return schedule


def confirm_all_drafts(
    db: Session,
    *,
    actor_id: str | None = None,
    history_write_retries: int = 1,
) -> ConfirmAllResult:
    drafts = list(db.execute(select(Draft).order_by(Draft.created_at, Draft.id)).scalars())
    result = ConfirmAllResult()
    if not drafts:
        return result

    result.confirmation_date = utcnow()
    draft_ids = [draft.id for draft in drafts]
    batch_ids: set[str] = set()

    # Each draft must observe the schedules written before it.
    for draft_id in draft_ids:
        result.processed += 1
        try:
            failure = _confirm_into_schedules(db, draft_id, batch_ids, result)
        except IntegrityError as exc:
            db.rollback()
            failure = _storage_failure(db, draft_id, exc)
        except AppError as exc:
            db.rollback()
            logger.warning("DRAFT CONFIRM FAILED | draft_id=%s | error=%s", draft_id, exc.message)
            failure = DraftFailure(draft_id, exc.message)
        except Exception as exc:
            db.rollback()
            logger.exception("DRAFT CONFIRM FAILED | draft_id=%s", draft_id)
            failure = DraftFailure(draft_id, f"Draft {draft_id} could not be confirmed: {exc}")
        if failure is not None:
            result.errors.append(failure)

    _record_batch_snapshot(db, result, actor_id=actor_id, retries=history_write_retries)

    logger.info(
        "CONFIRM ALL DONE | processed=%s | created=%s | updated=%s | failed=%s",
        result.processed,
        result.created,
        result.updated,
        len(result.errors),
    )
    return result


def _confirm_into_schedules(
    db: Session,
    draft_id: str,
    batch_ids: set[str],
    result: ConfirmAllResult,
) -> DraftFailure | None:
    draft = db.get(Draft, draft_id)
    if draft is None:
        return DraftFailure(draft_id, f"Draft {draft_id} no longer exists")

    problem = draft_reference_problem(db, draft)
    if problem:
        return DraftFailure(draft_id, problem)

    proposal = SlotProposal.from_record(draft)
    hits = find_conflicts(db, (Schedule,), proposal)

    same_batch = [hit for hit in hits if hit.record_id in batch_ids]
    if same_batch:
        return DraftFailure(
            draft_id,
            f"Conflict for draft {draft_id}: slot already taken by another draft of this batch",
            conflict_reasons(same_batch),
        )

    if hits:
        target = db.get(Schedule, hits[0].record_id)
        others = find_conflicts(db, (Schedule,), proposal, exclude_ids={target.id})
        if others:
            return DraftFailure(
                draft_id,
                f"Conflict for draft {draft_id}: trainer, room or group already booked",
                conflict_reasons(others),
            )
        target.copy_assignment_from(draft)
        schedule = target
        created = False
    else:
        schedule = Schedule()
        schedule.copy_assignment_from(draft)
        db.add(schedule)
        created = True

    db.delete(draft)
    db.commit()
    db.refresh(schedule)

    batch_ids.add(schedule.id)
    result.schedules.append(schedule)
    if created:
        result.created += 1
    else:
        result.updated += 1
    return None


def _storage_failure(db: Session, draft_id: str, exc: IntegrityError) -> DraftFailure:
    draft = db.get(Draft, draft_id)
    if draft is None:
        return DraftFailure(draft_id, f"Conflict for draft {draft_id}: slot already booked")
    error = storage_conflict_error(db, (Schedule,), SlotProposal.from_record(draft), exc)
    return DraftFailure(draft_id, f"Conflict for draft {draft_id}: {error.message}", error.details["reasons"])


def _record_batch_snapshot(db: Session, result: ConfirmAllResult, *, actor_id: str | None, retries: int) -> None:
    written_ids = {schedule.id for schedule in result.schedules}
    untouched = [
        schedule
        for schedule in db.execute(select(Schedule).order_by(Schedule.day_id, Schedule.slot_id, Schedule.created_at)).scalars()
        if schedule.id not in written_ids
    ]
    snapshot = [snapshot_entry(item) for item in present_assignments(db, [*result.schedules, *untouched])]

    for attempt in range(1, max(0, retries) + 2):
        try:
            record_history(
                db,
                action=HistoryAction.CONFIRMED,
                snapshot=snapshot,
                confirmation_date=result.confirmation_date,
                created_by_id=actor_id,
            )
            db.commit()
            return
        except SQLAlchemyError:
            db.rollback()
            logger.exception("HISTORY WRITE FAILED | attempt=%s | schedules=%s", attempt, len(snapshot))
    result.warnings.append(HISTORY_WARNING)
