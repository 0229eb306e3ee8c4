"""create fitforge tables

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2025-12-12 10:04:51.318214

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "routines",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("days", sa.JSON(), nullable=False),
        sa.Column("current_day_index", sa.Integer(), nullable=False),
        sa.Column("progressive_overload_percentage", sa.Float(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("routine_id", sa.String(length=36), nullable=False),
        sa.Column("routine_name", sa.String(), nullable=False),
        sa.Column("day_id", sa.String(length=36), nullable=False),
        sa.Column("day_name", sa.String(), nullable=False),
        sa.Column("exercises", sa.JSON(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=True),
        sa.Column("total_volume", sa.Float(), nullable=False),
        sa.Column("total_sets", sa.Integer(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("weight_unit", sa.String(length=3), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("ai_feedback", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Sessions are looked up per routine and read in start order
    op.create_index(
        op.f("ix_workout_sessions_routine_id"),
        "workout_sessions",
        ["routine_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_workout_sessions_start_time"),
        "workout_sessions",
        ["start_time"],
        unique=False,
    )

    op.create_table(
        "health_metrics",
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("calories_burned", sa.Float(), nullable=False),
        sa.Column("calories_consumed", sa.Float(), nullable=False),
        sa.Column("sleep_hours", sa.Float(), nullable=False),
        sa.Column("sleep_percentage", sa.Integer(), nullable=False),
        sa.Column("hrv", sa.Float(), nullable=False),
        sa.Column("resting_heart_rate", sa.Float(), nullable=False),
        sa.Column("stress_score", sa.Integer(), nullable=False),
        sa.Column("recovery_score", sa.Integer(), nullable=False),
        sa.Column("exertion_score", sa.Float(), nullable=False),
        sa.Column("energy_balance", sa.Float(), nullable=False),
        sa.Column("last_calculated", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("date"),
    )

    op.create_table(
        "raw_health_samples",
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("sleep_hours", sa.Float(), nullable=True),
        sa.Column("hrv", sa.Float(), nullable=True),
        sa.Column("resting_heart_rate", sa.Float(), nullable=True),
        sa.Column("calories_burned", sa.Float(), nullable=True),
        sa.Column("calories_consumed", sa.Float(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("date"),
    )


def downgrade() -> None:
    op.drop_table("raw_health_samples")
    op.drop_table("health_metrics")
    op.drop_index(
        op.f("ix_workout_sessions_start_time"), table_name="workout_sessions"
    )
    op.drop_index(op.f("ix_workout_sessions_routine_id"), table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_table("routines")
