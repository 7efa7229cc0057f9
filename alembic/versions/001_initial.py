"""initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables: users, data, data_history, thresholds, recipients,
threshold_recipients, notifications, job_runs.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "data",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("series_id", sa.String(64), nullable=False),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("previous_value", sa.Float(), nullable=False),
        sa.Column("latest_value", sa.Float(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("year", sa.String(4), nullable=False),
        sa.Column("period", sa.String(8), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("series_id"),
    )
    op.create_table(
        "data_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("data_id", sa.Integer(), nullable=False),
        sa.Column("year", sa.String(4), nullable=False),
        sa.Column("period", sa.String(8), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["data_id"], ["data.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("data_id", "year", "period", name="uq_data_history_data_period"),
    )
    op.create_index("ix_data_history_data_id", "data_history", ["data_id"])
    op.create_table(
        "thresholds",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("owner_user_id", sa.Integer(), nullable=False),
        sa.Column("data_id", sa.Integer(), nullable=False),
        sa.Column("magnitude_percent", sa.Float(), nullable=False),
        sa.Column("notify_owner", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["data_id"], ["data.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_thresholds_owner_user_id", "thresholds", ["owner_user_id"])
    op.create_index("ix_thresholds_data_id", "thresholds", ["data_id"])
    op.create_table(
        "recipients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("designation", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "threshold_recipients",
        sa.Column("threshold_id", sa.Integer(), nullable=False),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["threshold_id"], ["thresholds.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipient_id"], ["recipients.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("threshold_id", "recipient_id"),
    )
    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("recipient_id", sa.Integer(), nullable=True),
        sa.Column("threshold_id", sa.Integer(), nullable=False),
        sa.Column(
            "sent_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_message", sa.Text(), nullable=True),
        sa.Column("recipient_message", sa.Text(), nullable=True),
        sa.Column("delivered", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("data_year", sa.String(4), nullable=True),
        sa.Column("data_period", sa.String(8), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipient_id"], ["recipients.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["threshold_id"], ["thresholds.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notifications_threshold_period",
        "notifications",
        ["threshold_id", "data_year", "data_period"],
    )
    op.create_table(
        "job_runs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("job_type", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.Column("series_updated", sa.Integer(), nullable=True),
        sa.Column("breaches_found", sa.Integer(), nullable=True),
        sa.Column("notifications_sent", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("job_runs", if_exists=True)
    op.drop_index("ix_notifications_threshold_period", table_name="notifications")
    op.drop_table("notifications", if_exists=True)
    op.drop_table("threshold_recipients", if_exists=True)
    op.drop_table("recipients", if_exists=True)
    op.drop_index("ix_thresholds_data_id", table_name="thresholds")
    op.drop_index("ix_thresholds_owner_user_id", table_name="thresholds")
    op.drop_table("thresholds", if_exists=True)
    op.drop_index("ix_data_history_data_id", table_name="data_history")
    op.drop_table("data_history", if_exists=True)
    op.drop_table("data", if_exists=True)
    op.drop_table("users", if_exists=True)
