"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("lead_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_lead_id", "users", ["lead_id"])

    op.create_table(
        "requirements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("client_domain", sa.String(length=255), nullable=False),
        sa.Column("assigned_skill", sa.String(length=255), nullable=False),
        sa.Column("ecms_id", sa.String(length=120), nullable=False),
        sa.Column("required_experience", sa.String(length=120), nullable=False),
        sa.Column("required_location", sa.String(length=255), nullable=False),
        sa.Column("assigned_budget", sa.String(length=120), nullable=False),
        sa.Column("openings", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("recruiter_name", sa.String(length=255), nullable=True),
        sa.Column("team_lead_remarks", sa.Text(), nullable=True),
        sa.Column("profiles_submitted", sa.Integer(), nullable=False),
        sa.Column("assignee_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("openings >= 1", name="ck_requirements_openings_positive"),
        sa.CheckConstraint("profiles_submitted >= 0", name="ck_requirements_profiles_submitted"),
        sa.CheckConstraint("status IN ('Open', 'Closed')", name="ck_requirements_status"),
    )
    op.create_index("ix_requirements_ecms_id", "requirements", ["ecms_id"])
    op.create_index("ix_requirements_status", "requirements", ["status"])
    op.create_index("ix_requirements_assignee_id", "requirements", ["assignee_id"])
    op.create_index("ix_requirements_created_by", "requirements", ["created_by"])

    op.create_table(
        "remarks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "requirement_id",
            sa.Integer(),
            sa.ForeignKey("requirements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("remark_type", sa.String(length=20), nullable=False),
        sa.Column("author_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("remark_type IN ('remark', 'issue')", name="ck_remarks_type"),
    )
    op.create_index("ix_remarks_requirement_id", "remarks", ["requirement_id"])
    op.create_index("ix_remarks_remark_type", "remarks", ["remark_type"])
    op.create_index("ix_remarks_author_id", "remarks", ["author_id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "requirement_id",
            sa.Integer(),
            sa.ForeignKey("requirements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("submitted_by", sa.Integer(), nullable=False),
        sa.Column("count", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("count >= 1", name="ck_submissions_count_positive"),
    )
    op.create_index("ix_submissions_requirement_id", "submissions", ["requirement_id"])
    op.create_index("ix_submissions_submitted_by", "submissions", ["submitted_by"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "requirement_id",
            sa.Integer(),
            sa.ForeignKey("requirements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("assigned_by", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_assignments_requirement_id", "assignments", ["requirement_id"])
    op.create_index("ix_assignments_employee_id", "assignments", ["employee_id"])


def downgrade() -> None:
    op.drop_table("assignments")
    op.drop_table("submissions")
    op.drop_table("remarks")
    op.drop_table("requirements")
    op.drop_table("users")
