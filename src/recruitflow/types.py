from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["superadmin", "lead", "employee"]
RequirementStatus = Literal["Open", "Closed"]
RemarkType = Literal["remark", "issue"]
Scope = Literal["all", "team", "assigned_or_open"]

ROLES: tuple[Role, ...] = ("superadmin", "lead", "employee")
OPEN: RequirementStatus = "Open"
CLOSED: RequirementStatus = "Closed"

REQUIRED_TEXT_FIELDS: tuple[str, ...] = (
    "client_domain",
    "assigned_skill",
    "ecms_id",
    "required_experience",
    "required_location",
    "assigned_budget",
)


class RequirementFields(BaseModel):
    client_domain: str = ""
    assigned_skill: str = ""
    ecms_id: str = ""
    required_experience: str = ""
    required_location: str = ""
    assigned_budget: str = ""
    openings: int = 0
    recruiter_name: str | None = None
    team_lead_remarks: str | None = None


class NewUser(BaseModel):
    name: str
    email: str
    password: str
    role: Role
    lead_id: int | None = None


class TeamPerformance(BaseModel):
    total_submissions: int = 0


class Summary(BaseModel):
    total_requirements: int = 0
    completed: int = 0
    pending: int = 0
    issues: int = 0
    team_performance: TeamPerformance = Field(default_factory=TeamPerformance)
