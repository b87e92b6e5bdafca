import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from trainsched.db.base import Base


class Track(Base):
    __tablename__ = "tracks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    establishment_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    groups: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    modules: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    def group_names(self) -> set[str]:
        return {item.get("name") for item in self.groups or [] if item.get("name")}

    def module_names(self) -> set[str]:
        return {item.get("name") for item in self.modules or [] if item.get("name")}
