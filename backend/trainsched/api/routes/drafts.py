from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from trainsched.api.deps import get_current_principal, get_db, require_planner
from trainsched.core.config import get_settings
from trainsched.core.security import Principal
from trainsched.schemas.assignment import AssignmentOut, ConfirmAllOut, DraftCreate, DraftErrorOut, DraftUpdate
from trainsched.services import confirmation, drafts
from trainsched.services.presenters import present_assignment, present_assignments

router = APIRouter()


@router.get("/drafts", response_model=list[AssignmentOut])
def list_drafts(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[AssignmentOut]:
    return present_assignments(db, drafts.list_drafts(db))


@router.post("/drafts", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
def create_draft(
    payload: DraftCreate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, drafts.create_draft(db, payload))


@router.post("/drafts/confirm-all", response_model=ConfirmAllOut)
def confirm_all_drafts(
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> JSONResponse:
    result = confirmation.confirm_all_drafts(
        db,
        actor_id=principal.id,
        history_write_retries=get_settings().history_write_retries,
    )
    if result.processed == 0:
        message = "No drafts to confirm"
    elif result.is_partial:
        message = "Partial confirmation: some drafts failed"
    else:
        message = "All drafts confirmed"

    body = ConfirmAllOut(
        message=message,
        data=present_assignments(db, result.schedules),
        errors=[
            DraftErrorOut(draft_id=item.draft_id, message=item.message, reasons=item.reasons)
            for item in result.errors
        ],
        warnings=result.warnings,
        created=result.created,
        updated=result.updated,
    )
    return JSONResponse(
        status_code=status.HTTP_207_MULTI_STATUS if result.is_partial else status.HTTP_200_OK,
        content=body.model_dump(mode="json", by_alias=True),
    )


@router.get("/drafts/{draft_id}", response_model=AssignmentOut)
def get_draft(
    draft_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, drafts.get_draft(db, draft_id))


@router.put("/drafts/{draft_id}", response_model=AssignmentOut)
def update_draft(
    draft_id: str,
    payload: DraftUpdate,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    return present_assignment(db, drafts.update_draft(db, draft_id, payload))


@router.delete("/drafts/{draft_id}")
def delete_draft(
    draft_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> dict:
    drafts.delete_draft(db, draft_id)
    return {"success": True, "data": {}}


@router.post("/drafts/{draft_id}/confirm", response_model=AssignmentOut)
def confirm_draft(
    draft_id: str,
    principal: Principal = Depends(require_planner),
    db: Session = Depends(get_db),
) -> AssignmentOut:
    schedule = confirmation.confirm_draft(db, draft_id, actor_id=principal.id)
    return present_assignment(db, schedule)
