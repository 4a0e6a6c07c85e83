from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from recruitflow.api.deps import get_current_user, get_db
from recruitflow.api.schemas import (
    AssignmentResponse,
    AssignRequest,
    RemarkCreateRequest,
    RemarkResponse,
    RequirementCreateRequest,
    RequirementResponse,
    RequirementUpdateRequest,
    SubmissionCreateRequest,
    SubmissionResponse,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
)
from recruitflow.core.dashboard import DashboardAggregator
from recruitflow.core.identity import IdentityService
from recruitflow.core.workflow import RequirementWorkflow
from recruitflow.db.models import User
from recruitflow.types import NewUser, RequirementFields, Summary

router = APIRouter(tags=["api"])


@router.post("/auth/login", response_model=TokenResponse)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)) -> TokenResponse:
    identity = IdentityService(db)
    user = identity.authenticate(form_data.username, form_data.password)
    return TokenResponse(access_token=identity.issue_token(user))


@router.get("/me", response_model=UserResponse)
def me(current: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current)


@router.post("/auth/register", response_model=UserResponse)
def register(
    payload: UserCreateRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    user = IdentityService(db).register(current, NewUser(**payload.model_dump()))
    return UserResponse.model_validate(user)


@router.get("/users", response_model=list[UserResponse])
def list_users(current: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[UserResponse]:
    return [UserResponse.model_validate(row) for row in IdentityService(db).list_users(current)]


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    IdentityService(db).delete(current, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/requirements", response_model=list[RequirementResponse])
def list_requirements(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RequirementResponse]:
    rows = RequirementWorkflow(db).list_requirements(current)
    return [RequirementResponse.model_validate(row) for row in rows]


@router.post("/requirements", response_model=RequirementResponse)
def create_requirement(
    payload: RequirementCreateRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequirementResponse:
    requirement = RequirementWorkflow(db).create_requirement(current, RequirementFields(**payload.model_dump()))
    return RequirementResponse.model_validate(requirement)


@router.get("/requirements/{requirement_id}", response_model=RequirementResponse)
def get_requirement(
    requirement_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequirementResponse:
    return RequirementResponse.model_validate(RequirementWorkflow(db).get_requirement(current, requirement_id))


@router.patch("/requirements/{requirement_id}", response_model=RequirementResponse)
def update_requirement(
    requirement_id: int,
    payload: RequirementUpdateRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequirementResponse:
    changes = payload.model_dump(include=payload.model_fields_set)
    if "status" in changes and changes["status"] is None:
        changes.pop("status")
    requirement = RequirementWorkflow(db).update_requirement(current, requirement_id, changes)
    return RequirementResponse.model_validate(requirement)


@router.post("/requirements/{requirement_id}/toggle", response_model=RequirementResponse)
def toggle_requirement(
    requirement_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequirementResponse:
    return RequirementResponse.model_validate(RequirementWorkflow(db).toggle_status(current, requirement_id))


@router.post("/requirements/{requirement_id}/assign", response_model=RequirementResponse)
def assign_requirement(
    requirement_id: int,
    payload: AssignRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RequirementResponse:
    requirement = RequirementWorkflow(db).assign(current, requirement_id, payload.employee_id)
    return RequirementResponse.model_validate(requirement)


@router.get("/requirements/{requirement_id}/assignments", response_model=list[AssignmentResponse])
def list_assignments(
    requirement_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[AssignmentResponse]:
    rows = RequirementWorkflow(db).list_assignments(current, requirement_id)
    return [AssignmentResponse.model_validate(row) for row in rows]


@router.post("/submissions", response_model=SubmissionResponse)
def create_submission(
    payload: SubmissionCreateRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SubmissionResponse:
    submission = RequirementWorkflow(db).submit_profile(current, payload.requirement_id, payload.count)
    return SubmissionResponse.model_validate(submission)


@router.get("/submissions/{requirement_id}", response_model=list[SubmissionResponse])
def list_submissions(
    requirement_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[SubmissionResponse]:
    rows = RequirementWorkflow(db).list_submissions(current, requirement_id)
    return [SubmissionResponse.model_validate(row) for row in rows]


@router.post("/remarks", response_model=RemarkResponse)
def add_remark(
    payload: RemarkCreateRequest,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RemarkResponse:
    remark = RequirementWorkflow(db).append_remark(
        current,
        payload.requirement_id,
        payload.text,
        payload.remark_type,
    )
    return RemarkResponse.model_validate(remark)


@router.get("/remarks/{requirement_id}", response_model=list[RemarkResponse])
def list_remarks(
    requirement_id: int,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RemarkResponse]:
    rows = RequirementWorkflow(db).list_remarks(current, requirement_id)
    return [RemarkResponse.model_validate(row) for row in rows]


@router.get("/dashboard/summary", response_model=Summary)
def dashboard_summary(current: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Summary:
    return DashboardAggregator(db).summarize(current)
