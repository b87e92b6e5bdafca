from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.api.deps import get_current_principal, get_db, require_planner
from trainsched.core.security import Principal
from trainsched.models.establishment import Establishment
from trainsched.schemas.reference import EstablishmentCreate, EstablishmentOut, EstablishmentUpdate

router = APIRouter()


def _rooms_taken_elsewhere(db: Session, rooms: list[str], exclude_id: str | None = None) -> list[str]:
    wanted = set(rooms)
    taken: set[str] = set()
    for establishment in db.execute(select(Establishment)).scalars():
        if establishment.id == exclude_id:
            continue
        taken.update(wanted.intersection(establishment.rooms or []))
    return sorted(taken)


@router.get("", response_model=list[EstablishmentOut])
def list_establishments(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[EstablishmentOut]:
    return list(db.execute(select(Establishment).order_by(Establishment.name)).scalars())


@router.post("", response_model=EstablishmentOut, status_code=status.HTTP_201_CREATED)
def create_establishment(
    payload: EstablishmentCreate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> EstablishmentOut:
    # A room name resolves to exactly one establishment.
    taken = _rooms_taken_elsewhere(db, payload.rooms)
    if taken:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Rooms already assigned: {', '.join(taken)}")
    establishment = Establishment(**payload.model_dump())
    db.add(establishment)
    db.commit()
    db.refresh(establishment)
    return establishment


@router.get("/{establishment_id}", response_model=EstablishmentOut)
def get_establishment(
    establishment_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> EstablishmentOut:
    establishment = db.get(Establishment, establishment_id)
    if establishment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Establishment not found")
    return establishment


@router.put("/{establishment_id}", response_model=EstablishmentOut)
def update_establishment(
    establishment_id: str,
    payload: EstablishmentUpdate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> EstablishmentOut:
    establishment = db.get(Establishment, establishment_id)
    if establishment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Establishment not found")

    data = payload.model_dump(exclude_unset=True)
    if data.get("rooms"):
        taken = _rooms_taken_elsewhere(db, data["rooms"], exclude_id=establishment_id)
        if taken:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Rooms already assigned: {', '.join(taken)}")
    for key, value in data.items():
        if value is not None:
            setattr(establishment, key, value)
    db.commit()
    db.refresh(establishment)
    return establishment


@router.delete("/{establishment_id}")
def delete_establishment(
    establishment_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> dict:
    establishment = db.get(Establishment, establishment_id)
    if establishment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Establishment not found")
    db.delete(establishment)
    db.commit()
    return {"success": True}
