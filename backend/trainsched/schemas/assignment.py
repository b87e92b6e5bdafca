from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DraftCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    trainer_name: str = Field(alias="trainerName", min_length=1, max_length=50)
    room: str = Field(alias="salleName", min_length=1, max_length=50)
    group_name: str = Field(alias="groupName", min_length=1, max_length=50)
    track_id: str = Field(alias="filiereId", min_length=1, max_length=36)
    day_id: int = Field(alias="dayId", ge=1, le=6, strict=True)
    slot_id: int = Field(alias="slotId", ge=1, le=4, strict=True)
    module_name: str | None = Field(default=None, alias="moduleName", max_length=50)
    module_trainer_id: str | None = Field(default=None, alias="moduleTrainerId", max_length=36)


class DraftUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    trainer_id: str = Field(alias="trainerId", min_length=1, max_length=36)
    trainer_name: str | None = Field(default=None, alias="trainerName", max_length=50)
    room: str = Field(alias="salleName", min_length=1, max_length=50)
    group_name: str = Field(alias="groupName", min_length=1, max_length=50)
    track_id: str = Field(alias="filiereId", min_length=1, max_length=36)
    day_id: int = Field(alias="dayId", ge=1, le=6, strict=True)
    slot_id: int = Field(alias="slotId", ge=1, le=4, strict=True)
    module_name: str | None = Field(default=None, alias="moduleName", max_length=50)
    module_trainer_id: str | None = Field(default=None, alias="moduleTrainerId", max_length=36)


class ScheduleCreate(DraftCreate):
    pass


class ScheduleUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    trainer_name: str | None = Field(default=None, alias="trainerName", min_length=1, max_length=50)
    room: str | None = Field(default=None, alias="salleName", min_length=1, max_length=50)
    group_name: str | None = Field(default=None, alias="groupName", min_length=1, max_length=50)
    track_id: str | None = Field(default=None, alias="filiereId", min_length=1, max_length=36)
    day_id: int | None = Field(default=None, alias="dayId", ge=1, le=6, strict=True)
    slot_id: int | None = Field(default=None, alias="slotId", ge=1, le=4, strict=True)
    module_name: str | None = Field(default=None, alias="moduleName", max_length=50)


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class ReferenceOut(CamelModel):
    id: str
    name: str


class ModuleOut(CamelModel):
    name: str
    trainer: ReferenceOut | None = None


class AssignmentOut(CamelModel):
    id: str
    trainer: ReferenceOut
    room: str
    group: str
    track: ReferenceOut
    day_id: int
    day: str
    slot_id: int
    start_time: str
    end_time: str
    module: ModuleOut | None = None


class DraftErrorOut(CamelModel):
    draft_id: str
    message: str
    reasons: list[str] = Field(default_factory=list)


class ConfirmAllOut(CamelModel):
    message: str
    data: list[AssignmentOut] = Field(default_factory=list)
    errors: list[DraftErrorOut] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    created: int = 0
    updated: int = 0
