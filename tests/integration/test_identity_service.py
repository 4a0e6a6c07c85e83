import pytest

from recruitflow.core.identity import IdentityService
from recruitflow.db.repositories import Repository
from recruitflow.errors import AuthError, Conflict, Forbidden, NotFound, ValidationError
from recruitflow.types import NewUser


def test_authenticate_with_valid_and_invalid_credentials(db, admin) -> None:
    identity = IdentityService(db)
    user = identity.authenticate("admin@demo.com", "admin123")
    assert user.id == admin.id

    with pytest.raises(AuthError):
        identity.authenticate("admin@demo.com", "wrong")
    with pytest.raises(AuthError):
        identity.authenticate("nobody@demo.com", "admin123")


def test_token_resolves_back_to_user(db, lead) -> None:
    identity = IdentityService(db)
    token = identity.issue_token(lead)
    assert identity.resolve_token(token).id == lead.id


def test_token_for_deleted_user_is_rejected(db, admin, make_user) -> None:
    identity = IdentityService(db)
    doomed = make_user("employee")
    token = identity.issue_token(doomed)
    identity.delete(admin, doomed.id)
    with pytest.raises(AuthError):
        identity.resolve_token(token)


def test_superadmin_registers_lead_and_employee(db, admin) -> None:
    identity = IdentityService(db)
    lead = identity.register(admin, NewUser(name="L", email="l@demo.com", password="pw", role="lead"))
    emp = identity.register(
        admin,
        NewUser(name="E", email="e@demo.com", password="pw", role="employee", lead_id=lead.id),
    )
    assert emp.lead_id == lead.id
    assert emp.password_hash != "pw"
    assert identity.authenticate("e@demo.com", "pw").id == emp.id


def test_non_superadmin_cannot_register_and_store_is_unchanged(db, lead, employee) -> None:
    identity = IdentityService(db)
    before = len(Repository(db).list_users())
    for caller in (lead, employee):
        with pytest.raises(Forbidden):
            identity.register(caller, NewUser(name="X", email="x@demo.com", password="pw", role="employee"))
    assert len(Repository(db).list_users()) == before


def test_duplicate_email_is_conflict(db, admin, lead) -> None:
    identity = IdentityService(db)
    with pytest.raises(Conflict):
        identity.register(admin, NewUser(name="Dup", email="lead@demo.com", password="pw", role="lead"))


def test_lead_id_must_point_to_a_lead(db, admin, employee) -> None:
    identity = IdentityService(db)
    with pytest.raises(ValidationError) as excinfo:
        identity.register(
            admin,
            NewUser(name="E2", email="e2@demo.com", password="pw", role="employee", lead_id=employee.id),
        )
    assert excinfo.value.fields == ["lead_id"]
    assert Repository(db).get_user_by_email("e2@demo.com") is None


def test_non_superadmin_cannot_delete_and_store_is_unchanged(db, lead, employee) -> None:
    identity = IdentityService(db)
    with pytest.raises(Forbidden):
        identity.delete(lead, employee.id)
    with pytest.raises(Forbidden):
        identity.delete(employee, lead.id)
    assert identity.get(employee.id).id == employee.id
    assert identity.get(lead.id).id == lead.id


def test_delete_missing_user_is_not_found(db, admin) -> None:
    with pytest.raises(NotFound):
        IdentityService(db).delete(admin, 9999)


def test_deleting_a_lead_keeps_their_employees(db, admin) -> None:
    identity = IdentityService(db)
    lead = identity.register(admin, NewUser(name="L", email="l@demo.com", password="pw", role="lead"))
    emp = identity.register(
        admin,
        NewUser(name="Emp", email="emp@demo.com", password="pw", role="employee", lead_id=lead.id),
    )
    lead_id, emp_id = lead.id, emp.id

    identity.delete(admin, lead_id)

    with pytest.raises(NotFound):
        identity.get(lead_id)
    survivor = identity.get(emp_id)
    assert survivor.name == "Emp"
    assert survivor.lead_id is None


def test_list_users_is_superadmin_only(db, admin, lead) -> None:
    identity = IdentityService(db)
    assert {user.id for user in identity.list_users(admin)} == {admin.id, lead.id}
    with pytest.raises(Forbidden):
        identity.list_users(lead)


def test_bootstrap_superadmin_only_once(db) -> None:
    identity = IdentityService(db)
    first = identity.bootstrap_superadmin("Root", "root@demo.com", "rootpw")
    assert first.role == "superadmin"
    with pytest.raises(Conflict):
        identity.bootstrap_superadmin("Other", "other@demo.com", "pw")
