from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from trainsched.api.deps import get_current_principal, get_db, require_planner
from trainsched.core.security import Principal
from trainsched.models.trainer import Trainer
from trainsched.schemas.reference import TrainerCreate, TrainerOut, TrainerUpdate

router = APIRouter()


def _ensure_unique(db: Session, data: dict, exclude_id: str | None = None) -> None:
    clauses = [getattr(Trainer, key) == data[key] for key in ("matricule", "name", "email") if data.get(key)]
    if not clauses:
        return
    statement = select(Trainer).where(or_(*clauses))
    if exclude_id:
        statement = statement.where(Trainer.id != exclude_id)
    if db.execute(statement).scalars().first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Trainer matricule, name or email already exists",
        )


@router.get("", response_model=list[TrainerOut])
def list_trainers(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> list[TrainerOut]:
    return list(db.execute(select(Trainer).order_by(Trainer.name)).scalars())


@router.post("", response_model=TrainerOut, status_code=status.HTTP_201_CREATED)
def create_trainer(
    payload: TrainerCreate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> TrainerOut:
    data = payload.model_dump()
    _ensure_unique(db, data)
    trainer = Trainer(**data)
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    return trainer


@router.get("/{trainer_id}", response_model=TrainerOut)
def get_trainer(
    trainer_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> TrainerOut:
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")
    return trainer


@router.put("/{trainer_id}", response_model=TrainerOut)
def update_trainer(
    trainer_id: str,
    payload: TrainerUpdate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> TrainerOut:
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")

    data = payload.model_dump(exclude_unset=True)
    _ensure_unique(db, data, exclude_id=trainer_id)
    for key, value in data.items():
        setattr(trainer, key, value)
    db.commit()
    db.refresh(trainer)
    return trainer


@router.delete("/{trainer_id}")
def delete_trainer(
    trainer_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> dict:
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trainer not found")
    db.delete(trainer)
    db.commit()
    return {"success": True}
