from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from recruitflow.db.base import Base, TimestampMixin, utcnow


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    lead_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), index=True, nullable=True
    )


class Requirement(TimestampMixin, Base):
    __tablename__ = "requirements"
    __table_args__ = (
        CheckConstraint("openings >= 1", name="ck_requirements_openings_positive"),
        CheckConstraint("profiles_submitted >= 0", name="ck_requirements_profiles_submitted"),
        CheckConstraint("status IN ('Open', 'Closed')", name="ck_requirements_status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    client_domain: Mapped[str] = mapped_column(String(255), nullable=False)
    assigned_skill: Mapped[str] = mapped_column(String(255), nullable=False)
    ecms_id: Mapped[str] = mapped_column(String(120), index=True, nullable=False)
    required_experience: Mapped[str] = mapped_column(String(120), nullable=False)
    required_location: Mapped[str] = mapped_column(String(255), nullable=False)
    assigned_budget: Mapped[str] = mapped_column(String(120), nullable=False)
    openings: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="Open", index=True, nullable=False)
    recruiter_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    team_lead_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    profiles_submitted: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    assignee_id: Mapped[int | None] = mapped_column(Integer, index=True, nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, index=True, nullable=False)


class Remark(Base):
    __tablename__ = "remarks"
    __table_args__ = (CheckConstraint("remark_type IN ('remark', 'issue')", name="ck_remarks_type"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requirement_id: Mapped[int] = mapped_column(
        ForeignKey("requirements.id", ondelete="CASCADE"), index=True, nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    remark_type: Mapped[str] = mapped_column(String(20), default="remark", index=True, nullable=False)
    author_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (CheckConstraint("count >= 1", name="ck_submissions_count_positive"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requirement_id: Mapped[int] = mapped_column(
        ForeignKey("requirements.id", ondelete="CASCADE"), index=True, nullable=False
    )
    submitted_by: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    count: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Assignment(Base):
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    requirement_id: Mapped[int] = mapped_column(
        ForeignKey("requirements.id", ondelete="CASCADE"), index=True, nullable=False
    )
    employee_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    assigned_by: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
