"""Fixed weekly grid: six teaching days of four time windows each.

Day and slot ids are 1-based. History snapshots store the day as its
name, so the id/name mapping below must never be reordered.
"""

from __future__ import annotations

from dataclasses import dataclass

from trainsched.core.exceptions import InvalidSlotError, ValidationError

DAY_NAMES: tuple[str, ...] = ("LUNDI", "MARDI", "MERCREDI", "JEUDI", "VENDREDI", "SAMEDI")


@dataclass(frozen=True)
class TimeWindow:
    slot_id: int
    start: str
    end: str

    @property
    def label(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def duration_minutes(self) -> int:
        start_h, start_m = map(int, self.start.split(":"))
        end_h, end_m = map(int, self.end.split(":"))
        return (end_h * 60 + end_m) - (start_h * 60 + start_m)


TIME_WINDOWS: tuple[TimeWindow, ...] = (
    TimeWindow(1, "08:30", "11:00"),
    TimeWindow(2, "11:00", "13:30"),
    TimeWindow(3, "13:30", "16:00"),
    TimeWindow(4, "16:00", "18:30"),
)

DAY_IDS: tuple[int, ...] = tuple(range(1, len(DAY_NAMES) + 1))
SLOT_IDS: tuple[int, ...] = tuple(window.slot_id for window in TIME_WINDOWS)


@dataclass(frozen=True)
class SlotCoordinate:
    day_id: int
    slot_id: int

    @property
    def day_name(self) -> str:
        return day_name(self.day_id)

    @property
    def window(self) -> TimeWindow:
        return time_window(self.slot_id)


def is_valid_day(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value in DAY_IDS


def is_valid_slot(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value in SLOT_IDS


def validate_coordinate(day_id: object, slot_id: object) -> SlotCoordinate:
    if not is_valid_day(day_id) or not is_valid_slot(slot_id):
        raise InvalidSlotError(day_id, slot_id)
    return SlotCoordinate(day_id=day_id, slot_id=slot_id)


def day_name(day_id: int) -> str:
    if not is_valid_day(day_id):
        raise InvalidSlotError(day_id, None)
    return DAY_NAMES[day_id - 1]


def day_id_from_name(name: str) -> int:
    normalized = (name or "").strip().upper()
    try:
        return DAY_NAMES.index(normalized) + 1
    except ValueError as exc:
        raise ValidationError(f"Unknown day name: {name}") from exc


def time_window(slot_id: int) -> TimeWindow:
    if not is_valid_slot(slot_id):
        raise InvalidSlotError(None, slot_id)
    return TIME_WINDOWS[slot_id - 1]


def all_coordinates() -> list[SlotCoordinate]:
    return [SlotCoordinate(day_id, slot_id) for day_id in DAY_IDS for slot_id in SLOT_IDS]
