import pytest

from recruitflow.core.permissions import ACCESS_MATRIX, AccessPolicy
from recruitflow.errors import Forbidden


def test_superadmin_sees_everything_but_cannot_submit_profiles() -> None:
    policy = AccessPolicy(role="superadmin")
    assert policy.scope_for("read_requirements") == "all"
    assert policy.scope_for("change_status") == "all"
    assert policy.allows("create_requirement")
    assert policy.allows("register_user")
    assert not policy.allows("submit_profile")


def test_lead_is_scoped_to_team_for_reads_and_status_changes() -> None:
    policy = AccessPolicy(role="lead")
    assert policy.scope_for("read_requirements") == "team"
    assert policy.scope_for("change_status") == "team"
    assert policy.allows("assign_employee")
    assert not policy.allows("submit_profile")
    assert not policy.allows("delete_user")


def test_employee_submits_and_annotates_only() -> None:
    policy = AccessPolicy(role="employee")
    assert policy.scope_for("read_requirements") == "assigned_or_open"
    assert policy.allows("submit_profile")
    assert policy.allows("add_remark")
    assert policy.allows("add_issue")
    assert not policy.allows("create_requirement")
    assert not policy.allows("change_status")
    assert not policy.allows("assign_employee")


def test_require_raises_forbidden_with_role_in_message() -> None:
    with pytest.raises(Forbidden) as excinfo:
        AccessPolicy(role="employee").require("create_requirement")
    assert "employee" in excinfo.value.message
    assert excinfo.value.status_code == 403


def test_every_role_may_annotate_requirements() -> None:
    for action in ("add_remark", "add_issue"):
        assert set(ACCESS_MATRIX[action]) == {"superadmin", "lead", "employee"}


def test_unknown_role_is_refused_everything() -> None:
    policy = AccessPolicy(role="guest")
    assert not any(policy.allows(action) for action in ACCESS_MATRIX)
