"""Draft and confirmed schedule rows.

Both tables share one shape and the same three uniqueness constraints
scoped to a slot coordinate, so concurrent writers that race past the
application-level conflict check still cannot commit a double booking.
"""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from trainsched.db.base import Base


def _slot_table_args(table: str) -> tuple:
    return (
        UniqueConstraint("day_id", "slot_id", "trainer_id", name=f"uq_{table}_slot_trainer"),
        UniqueConstraint("day_id", "slot_id", "room", name=f"uq_{table}_slot_room"),
        UniqueConstraint("day_id", "slot_id", "group_name", name=f"uq_{table}_slot_group"),
        CheckConstraint("day_id BETWEEN 1 AND 6", name=f"ck_{table}_day_range"),
        CheckConstraint("slot_id BETWEEN 1 AND 4", name=f"ck_{table}_slot_range"),
    )


class AssignmentMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    trainer_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    trainer_name: Mapped[str | None] = mapped_column(String(50), nullable=True)  # Cached

    room: Mapped[str] = mapped_column(String(50), nullable=False)
    group_name: Mapped[str] = mapped_column(String(50), nullable=False)

    track_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    track_name: Mapped[str | None] = mapped_column(String(50), nullable=True)  # Cached

    day_id: Mapped[int] = mapped_column(Integer, nullable=False)
    slot_id: Mapped[int] = mapped_column(Integer, nullable=False)

    module_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    module_trainer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    module_trainer_name: Mapped[str | None] = mapped_column(String(50), nullable=True)  # Cached

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    def copy_assignment_from(self, other: "AssignmentMixin") -> None:
        for field in ASSIGNMENT_FIELDS:
            setattr(self, field, getattr(other, field))


ASSIGNMENT_FIELDS = (
    "trainer_id",
    "trainer_name",
    "room",
    "group_name",
    "track_id",
    "track_name",
    "day_id",
    "slot_id",
    "module_name",
    "module_trainer_id",
    "module_trainer_name",
)


class Draft(AssignmentMixin, Base):
    __tablename__ = "drafts"
    __table_args__ = _slot_table_args("drafts")


class Schedule(AssignmentMixin, Base):
    __tablename__ = "schedules"
    __table_args__ = _slot_table_args("schedules")
