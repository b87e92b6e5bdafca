from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from trainsched.api.deps import get_current_principal, get_db, require_planner
from trainsched.core.security import Principal
from trainsched.core.slot_grid import DAY_IDS, TIME_WINDOWS, day_name
from trainsched.models.assignment import Draft, Schedule
from trainsched.schemas.assignment import AssignmentOut, ScheduleCreate, ScheduleUpdate
from trainsched.schemas.conflict import AvailabilityOut, ConflictHitOut, DayOut, SlotGridOut, TimeWindowOut
from trainsched.schemas.history import HistoryEntryOut
from trainsched.services import schedules
from trainsched.services.conflict_service import SlotProposal, find_conflicts
from trainsched.services.history import list_history, parse_confirmation_date
from trainsched.services.presenters import present_assignment, present_assignments

router = APIRouter()

SCOPE_MODELS = {
    "all": (Draft, Schedule),
    "drafts": (Draft,),
    "schedules": (Schedule,),
}


@router.get("", response_model=list[AssignmentOut])
def list_schedules(
    trainer_id: str | None = Query(default=None, alias="trainerId"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[AssignmentOut]:
    return present_assignments(db, schedules.list_schedules(db, trainer_id=trainer_id))


@router.post("", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, schedules.create_schedule(db, payload))


@router.get("/grid", response_model=SlotGridOut)
def slot_grid(principal: Principal = Depends(get_current_principal)) -> SlotGridOut:
    return SlotGridOut(
        days=[DayOut(day_id=day_id, name=day_name(day_id)) for day_id in DAY_IDS],
        slots=[
            TimeWindowOut(slot_id=window.slot_id, label=window.label, start_time=window.start, end_time=window.end)
            for window in TIME_WINDOWS
        ],
    )


@router.get("/availability", response_model=AvailabilityOut)
def availability(
    day_id: int = Query(alias="dayId", ge=1, le=6),
    slot_id: int = Query(alias="slotId", ge=1, le=4),
    trainer_id: str | None = Query(default=None, alias="trainerId"),
    room: str | None = Query(default=None),
    group_name: str | None = Query(default=None, alias="groupName"),
    scope: Literal["all", "drafts", "schedules"] = Query(default="all"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> AvailabilityOut:
    proposal = SlotProposal(day_id=day_id, slot_id=slot_id, trainer_id=trainer_id, room=room, group_name=group_name)
    hits = find_conflicts(db, SCOPE_MODELS[scope], proposal)
    return AvailabilityOut(
        day_id=day_id,
        slot_id=slot_id,
        available=not hits,
        conflicts=[
            ConflictHitOut(reason=hit.reason.value, collection=hit.collection, record_id=hit.record_id) for hit in hits
        ],
    )


@router.get("/history", response_model=list[HistoryEntryOut])
def schedule_history(
    date: str | None = Query(default=None),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[HistoryEntryOut]:
    confirmation_date = parse_confirmation_date(date) if date else None
    return list_history(db, confirmation_date)


@router.get("/{schedule_id}", response_model=AssignmentOut)
def get_schedule(
    schedule_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, schedules.get_schedule(db, schedule_id))


@router.put("/{schedule_id}", response_model=AssignmentOut)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, schedules.update_schedule(db, schedule_id, payload))


@router.delete("/{schedule_id}")
def delete_schedule(
    schedule_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> dict:
    schedules.delete_schedule(db, schedule_id)
    return {"success": True, "data": {}}
