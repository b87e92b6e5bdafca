from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from trainsched.api.deps import get_current_principal, get_db, require_planner
from trainsched.core.security import Principal
from trainsched.models.establishment import Establishment
from trainsched.models.track import Track
from trainsched.schemas.reference import TrackCreate, TrackOut, TrackUpdate

router = APIRouter()


def _ensure_unique_name(db: Session, name: str, exclude_id: str | None = None) -> None:
    statement = select(Track).where(Track.name == name)
    if exclude_id:
        statement = statement.where(Track.id != exclude_id)
    if db.execute(statement).scalar_one_or_none() is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Track name already exists")


@router.get("", response_model=list[TrackOut])
def list_tracks(
    establishment_id: str | None = None,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[TrackOut]:
    statement = select(Track).order_by(Track.name)
    if establishment_id:
        statement = statement.where(Track.establishment_id == establishment_id)
    return list(db.execute(statement).scalars())


@router.post("", response_model=TrackOut, status_code=status.HTTP_201_CREATED)
def create_track(
    payload: TrackCreate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> TrackOut:
    if db.get(Establishment, payload.establishment_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Establishment not found")
    _ensure_unique_name(db, payload.name)
    track = Track(**payload.model_dump())
    db.add(track)
    db.commit()
    db.refresh(track)
    return track


@router.get("/{track_id}", response_model=TrackOut)
def get_track(
    track_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> TrackOut:
    track = db.get(Track, track_id)
    if track is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")
    return track


@router.put("/{track_id}", response_model=TrackOut)
def update_track(
    track_id: str,
    payload: TrackUpdate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> TrackOut:
    track = db.get(Track, track_id)
    if track is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in data:
        _ensure_unique_name(db, data["name"], exclude_id=track_id)
    for key, value in data.items():
        setattr(track, key, value)
    db.commit()
    db.refresh(track)
    return track


@router.delete("/{track_id}")
def delete_track(
    track_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> dict:
    track = db.get(Track, track_id)
    if track is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Track not found")
    db.delete(track)
    db.commit()
    return {"success": True}
