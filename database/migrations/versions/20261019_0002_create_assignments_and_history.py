"""create drafts, schedules and schedule history

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:00:01.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None


history_action_enum = sa.Enum("CREATED", "CONFIRMED", name="history_action")


def _create_assignment_table(table: str) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("trainer_id", sa.String(length=36), nullable=False),
        sa.Column("trainer_name", sa.String(length=50), nullable=True),
        sa.Column("room", sa.String(length=50), nullable=False),
        sa.Column("group_name", sa.String(length=50), nullable=False),
        sa.Column("track_id", sa.String(length=36), nullable=False),
        sa.Column("track_name", sa.String(length=50), nullable=True),
        sa.Column("day_id", sa.Integer(), nullable=False),
        sa.Column("slot_id", sa.Integer(), nullable=False),
        sa.Column("module_name", sa.String(length=50), nullable=True),
        sa.Column("module_trainer_id", sa.String(length=36), nullable=True),
        sa.Column("module_trainer_name", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("day_id", "slot_id", "trainer_id", name=f"uq_{table}_slot_trainer"),
        sa.UniqueConstraint("day_id", "slot_id", "room", name=f"uq_{table}_slot_room"),
        sa.UniqueConstraint("day_id", "slot_id", "group_name", name=f"uq_{table}_slot_group"),
        sa.CheckConstraint("day_id BETWEEN 1 AND 6", name=f"ck_{table}_day_range"),
        sa.CheckConstraint("slot_id BETWEEN 1 AND 4", name=f"ck_{table}_slot_range"),
    )
    op.create_index(f"ix_{table}_trainer_id", table, ["trainer_id"], unique=False)
    op.create_index(f"ix_{table}_track_id", table, ["track_id"], unique=False)


def upgrade() -> None:
    _create_assignment_table("drafts")
    _create_assignment_table("schedules")

    op.create_table(
        "schedule_history",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("action", history_action_enum, nullable=False),
        sa.Column("schedule_id", sa.String(length=36), nullable=True),
        sa.Column("schedules", sa.JSON(), nullable=False),
        sa.Column("confirmation_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index(
        "ix_schedule_history_confirmation_date",
        "schedule_history",
        ["confirmation_date"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_schedule_history_confirmation_date", table_name="schedule_history")
    op.drop_table("schedule_history")
    history_action_enum.drop(op.get_bind(), checkfirst=True)
    for table in ("schedules", "drafts"):
        op.drop_index(f"ix_{table}_track_id", table_name=table)
        op.drop_index(f"ix_{table}_trainer_id", table_name=table)
        op.drop_table(table)
