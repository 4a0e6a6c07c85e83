import pytest
from pydantic import ValidationError

from recruitflow.api.schemas import RemarkCreateRequest, RequirementUpdateRequest, UserCreateRequest


def test_requirement_update_refuses_direct_counter_writes() -> None:
    with pytest.raises(ValidationError):
        RequirementUpdateRequest(status="Closed", profiles_submitted=10)


def test_requirement_update_only_accepts_known_statuses() -> None:
    with pytest.raises(ValidationError):
        RequirementUpdateRequest(status="In Review")
    assert RequirementUpdateRequest(status="Closed").status == "Closed"


def test_remark_type_defaults_to_remark_and_rejects_unknown() -> None:
    assert RemarkCreateRequest(requirement_id=1, text="Client paused").remark_type == "remark"
    with pytest.raises(ValidationError):
        RemarkCreateRequest(requirement_id=1, text="x", remark_type="escalation")


def test_user_create_requires_known_role_and_valid_email() -> None:
    with pytest.raises(ValidationError):
        UserCreateRequest(name="X", email="x@demo.com", password="pw", role="manager")
    with pytest.raises(ValidationError):
        UserCreateRequest(name="X", email="not-an-email", password="pw", role="lead")
