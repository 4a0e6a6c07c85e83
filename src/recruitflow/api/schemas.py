from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from recruitflow.types import RemarkType, RequirementStatus, Role


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserCreateRequest(BaseModel):
    name: str
    email: EmailStr
    password: str = Field(min_length=1)
    role: Role
    lead_id: int | None = None


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    lead_id: int | None = None


class RequirementCreateRequest(BaseModel):
    client_domain: str
    assigned_skill: str
    ecms_id: str
    required_experience: str
    required_location: str
    assigned_budget: str
    openings: int
    recruiter_name: str | None = None
    team_lead_remarks: str | None = None


class RequirementUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: RequirementStatus | None = None
    team_lead_remarks: str | None = None


class RequirementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_domain: str
    assigned_skill: str
    ecms_id: str
    required_experience: str
    required_location: str
    assigned_budget: str
    openings: int
    status: RequirementStatus
    recruiter_name: str | None = None
    team_lead_remarks: str | None = None
    profiles_submitted: int
    assignee_id: int | None = None
    created_by: int
    created_at: datetime


class AssignRequest(BaseModel):
    employee_id: int


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    requirement_id: int
    employee_id: int
    assigned_by: int
    is_active: bool
    assigned_at: datetime


class SubmissionCreateRequest(BaseModel):
    requirement_id: int
    count: int = 1


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    requirement_id: int
    submitted_by: int
    count: int
    created_at: datetime


class RemarkCreateRequest(BaseModel):
    requirement_id: int
    text: str
    remark_type: RemarkType = "remark"


class RemarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    requirement_id: int
    text: str
    remark_type: RemarkType
    author_id: int
    created_at: datetime
