"""Append-only store of confirmed schedule snapshots."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.core.exceptions import ValidationError
from trainsched.models.schedule_history import HistoryAction, ScheduleHistory
from trainsched.schemas.history import HistoryEntryOut, HistoryScheduleOut

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_confirmation_date(raw: str) -> datetime:
    value = (raw or "").strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid confirmation date: {raw}", details={"field": "date"}) from exc
    return as_utc(parsed)


def record_history(
    db: Session,
    *,
    action: HistoryAction,
    snapshot: list[dict],
    confirmation_date: datetime,
    schedule_id: str | None = None,
    created_by_id: str | None = None,
) -> ScheduleHistory:
    """Stage a new history entry; the caller owns the transaction."""
    entry = ScheduleHistory(
        action=action,
        schedule_id=schedule_id,
        schedules=snapshot,
        confirmation_date=as_utc(confirmation_date),
        created_by_id=created_by_id,
    )
    db.add(entry)
    return entry


def list_history(db: Session, confirmation_date: datetime | None = None) -> list[HistoryEntryOut]:
    statement = select(ScheduleHistory).order_by(ScheduleHistory.confirmation_date.desc(), ScheduleHistory.id)
    if confirmation_date is not None:
        statement = statement.where(ScheduleHistory.confirmation_date == as_utc(confirmation_date))

    entries: list[HistoryEntryOut] = []
    for row in db.execute(statement).scalars():
        if not isinstance(row.schedules, list):
            logger.warning("Skipping malformed history entry | id=%s", row.id)
            continue
        entries.append(
            HistoryEntryOut(
                id=row.id,
                action=row.action,
                schedule_id=row.schedule_id,
                confirmation_date=as_utc(row.confirmation_date),
                created_at=as_utc(row.created_at) if row.created_at else None,
                created_by_id=row.created_by_id,
                schedules=_valid_snapshot_items(row),
            )
        )
    return entries


def _valid_snapshot_items(row: ScheduleHistory) -> list[HistoryScheduleOut]:
    items: list[HistoryScheduleOut] = []
    for raw in row.schedules:
        if not isinstance(raw, dict) or not raw.get("id") or not raw.get("trainer") or not raw.get("track"):
            continue
        try:
            items.append(HistoryScheduleOut.model_validate({"schedule_id": raw["id"], **raw}))
        except PydanticValidationError:
            logger.warning("Skipping malformed snapshot item | history_id=%s | item_id=%s", row.id, raw.get("id"))
    return items
