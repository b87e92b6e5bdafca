"""create reference tables

Revision ID: 20261019_0001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trainers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("matricule", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_trainers_matricule", "trainers", ["matricule"], unique=True)
    op.create_index("ix_trainers_name", "trainers", ["name"], unique=True)
    op.create_index("ix_trainers_email", "trainers", ["email"], unique=True)

    op.create_table(
        "establishments",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("rooms", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "tracks",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("establishment_id", sa.String(length=36), nullable=False),
        sa.Column("groups", sa.JSON(), nullable=False),
        sa.Column("modules", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_tracks_name", "tracks", ["name"], unique=True)
    op.create_index("ix_tracks_establishment_id", "tracks", ["establishment_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_tracks_establishment_id", table_name="tracks")
    op.drop_index("ix_tracks_name", table_name="tracks")
    op.drop_table("tracks")
    op.drop_table("establishments")
    op.drop_index("ix_trainers_email", table_name="trainers")
    op.drop_index("ix_trainers_name", table_name="trainers")
    op.drop_index("ix_trainers_matricule", table_name="trainers")
    op.drop_table("trainers")
