from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection

import trainsched.models  # noqa: F401
from trainsched.db.base import Base
from trainsched.db.session import engine

logger = logging.getLogger(__name__)

ASSIGNMENT_COLUMNS = {
    "id",
    "trainer_id",
    "room",
    "group_name",
    "track_id",
    "day_id",
    "slot_id",
    "module_name",
    "module_trainer_id",
}

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "trainers": {"id", "matricule", "name", "email"},
    "establishments": {"id", "name", "rooms"},
    "tracks": {"id", "name", "establishment_id", "groups", "modules"},
    "drafts": ASSIGNMENT_COLUMNS,
    "schedules": ASSIGNMENT_COLUMNS,
    "schedule_history": {"id", "action", "schedule_id", "schedules", "confirmation_date"},
}


def schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    """Return the required tables that are missing and, per table, the missing columns."""
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(required - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = schema_gaps(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flat = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flat)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
