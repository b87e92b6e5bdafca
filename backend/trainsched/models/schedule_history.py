import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from trainsched.db.base import Base


class HistoryAction(str, Enum):
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"


class ScheduleHistory(Base):
    __tablename__ = "schedule_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    action: Mapped[HistoryAction] = mapped_column(SAEnum(HistoryAction, name="history_action"), nullable=False)
    schedule_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    schedules: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    confirmation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    created_by_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
