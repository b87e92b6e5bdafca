from typing import Literal

from trainsched.schemas.assignment import CamelModel


class ConflictHitOut(CamelModel):
    reason: Literal["trainer", "room", "group"]
    collection: Literal["draft", "schedule"]
    record_id: str


class AvailabilityOut(CamelModel):
    day_id: int
    slot_id: int
    available: bool
    conflicts: list[ConflictHitOut]


class TimeWindowOut(CamelModel):
    slot_id: int
    label: str
    start_time: str
    end_time: str


class DayOut(CamelModel):
    day_id: int
    name: str


class SlotGridOut(CamelModel):
    days: list[DayOut]
    slots: list[TimeWindowOut]
