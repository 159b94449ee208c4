"""Outpass requests, checkpoint logs and audit events.

Revision ID: 001_outpass_foundation
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001_outpass_foundation"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "outpass_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("requester_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("destination", sa.Text, nullable=False),
        sa.Column("window_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("window_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            sa.Text,
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column("decided_by", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("decided_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_outpass_requests_status",
        ),
        sa.CheckConstraint(
            "window_start < window_end",
            name="ck_outpass_requests_window",
        ),
    )
    op.create_index(
        "ix_outpass_requests_requester_id", "outpass_requests", ["requester_id"]
    )
    op.create_index(
        "ix_outpass_requests_status_created_at",
        "outpass_requests",
        ["status", "created_at"],
    )

    op.create_table(
        "outpass_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("seq", sa.BigInteger, sa.Identity(always=True), nullable=False),
        sa.Column(
            "request_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("outpass_requests.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("resident_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("direction", sa.Text, nullable=False),
        sa.Column("recorded_by", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "is_late", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column("notes", sa.Text, nullable=True),
        sa.CheckConstraint(
            "direction IN ('exit', 'return')",
            name="ck_outpass_logs_direction",
        ),
    )
    op.create_index(
        "ix_outpass_logs_request_id_recorded_at",
        "outpass_logs",
        ["request_id", "recorded_at"],
    )
    op.create_index(
        "ix_outpass_logs_resident_id_recorded_at",
        "outpass_logs",
        ["resident_id", "recorded_at"],
    )

    op.create_table(
        "audit_events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("actor", sa.Text, nullable=False),
        sa.Column("action", sa.Text, nullable=False),
        sa.Column("target_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column(
            "metadata",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )
    op.create_index("ix_audit_events_target_id", "audit_events", ["target_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_target_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index(
        "ix_outpass_logs_resident_id_recorded_at", table_name="outpass_logs"
    )
    op.drop_index("ix_outpass_logs_request_id_recorded_at", table_name="outpass_logs")
    op.drop_table("outpass_logs")
    op.drop_index(
        "ix_outpass_requests_status_created_at", table_name="outpass_requests"
    )
    op.drop_index("ix_outpass_requests_requester_id", table_name="outpass_requests")
    op.drop_table("outpass_requests")
