from pydantic import BaseModel, EmailStr, Field, field_validator


class NamedItem(BaseModel):
    name: str = Field(min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Name cannot be blank")
        return stripped


def _unique_names(items: list[NamedItem]) -> list[NamedItem]:
    seen: set[str] = set()
    for item in items:
        if item.name in seen:
            raise ValueError(f"Duplicate name: {item.name}")
        seen.add(item.name)
    return items


def _clean_rooms(value: list[str]) -> list[str]:
    cleaned = [room.strip() for room in value if room.strip()]
    if len(set(cleaned)) != len(cleaned):
        raise ValueError("Room names must be unique within an establishment")
    too_long = [room for room in cleaned if len(room) > 50]
    if too_long:
        raise ValueError(f"Room name too long: {too_long[0]}")
    return cleaned


class TrainerBase(BaseModel):
    matricule: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    phone_number: str | None = Field(default=None, max_length=20)


class TrainerCreate(TrainerBase):
    pass


class TrainerUpdate(BaseModel):
    matricule: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    phone_number: str | None = Field(default=None, max_length=20)


class TrainerOut(TrainerBase):
    id: str

    model_config = {"from_attributes": True}


class EstablishmentBase(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    rooms: list[str] = Field(default_factory=list, max_length=500)

    @field_validator("rooms")
    @classmethod
    def clean_rooms(cls, value: list[str]) -> list[str]:
        return _clean_rooms(value)


class EstablishmentCreate(EstablishmentBase):
    pass


class EstablishmentUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    rooms: list[str] | None = Field(default=None, max_length=500)

    @field_validator("rooms")
    @classmethod
    def clean_rooms(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        return _clean_rooms(value)


class EstablishmentOut(EstablishmentBase):
    id: str

    model_config = {"from_attributes": True}


class TrackBase(BaseModel):
    name: str = Field(min_length=2, max_length=50)
    establishment_id: str = Field(min_length=1, max_length=36)
    groups: list[NamedItem] = Field(default_factory=list, max_length=200)
    modules: list[NamedItem] = Field(default_factory=list, max_length=200)

    @field_validator("groups", "modules")
    @classmethod
    def unique_names(cls, value: list[NamedItem]) -> list[NamedItem]:
        return _unique_names(value)


class TrackCreate(TrackBase):
    pass


class TrackUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2, max_length=50)
    groups: list[NamedItem] | None = Field(default=None, max_length=200)
    modules: list[NamedItem] | None = Field(default=None, max_length=200)

    @field_validator("groups", "modules")
    @classmethod
    def unique_names(cls, value: list[NamedItem] | None) -> list[NamedItem] | None:
        if value is None:
            return value
        return _unique_names(value)


class TrackOut(TrackBase):
    id: str

    model_config = {"from_attributes": True}
