from datetime import datetime

from trainsched.models.schedule_history import HistoryAction
from trainsched.schemas.assignment import CamelModel, ModuleOut, ReferenceOut


class HistoryScheduleOut(CamelModel):
    id: str
    schedule_id: str
    trainer: ReferenceOut
    room: str
    group: str
    track: ReferenceOut
    day: str
    slot: int
    module: ModuleOut | None = None


class HistoryEntryOut(CamelModel):
    id: str
    action: HistoryAction
    schedule_id: str | None = None
    confirmation_date: datetime
    created_at: datetime | None = None
    created_by_id: str | None = None
    schedules: list[HistoryScheduleOut]
