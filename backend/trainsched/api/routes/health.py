from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trainsched.api.deps import get_db
from trainsched.db.bootstrap import schema_gaps
from trainsched.models.assignment import Draft

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok"}


@router.get("/health/ready")
def health_ready(db: Session = Depends(get_db)) -> JSONResponse:
    """Database reachable, schema complete, and the size of the draft backlog."""
    database = {"ok": True, "schema_ok": False, "missing_tables": [], "missing_columns": {}, "error": None}
    pending_drafts: int | None = None

    try:
        connection = db.connection()
        connection.execute(text("SELECT 1"))
        missing_tables, missing_columns = schema_gaps(connection)
        database.update(
            schema_ok=not missing_tables and not missing_columns,
            missing_tables=missing_tables,
            missing_columns=missing_columns,
        )
        if database["schema_ok"]:
            pending_drafts = db.execute(select(func.count()).select_from(Draft)).scalar_one()
    except SQLAlchemyError as exc:  # pragma: no cover - environment dependent
        db.rollback()
        database.update(ok=False, error=str(exc))

    ready = database["ok"] and database["schema_ok"]
    payload = {
        "status": "ok" if ready else "degraded",
        "database": database,
        "pending_drafts": pending_drafts,
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
