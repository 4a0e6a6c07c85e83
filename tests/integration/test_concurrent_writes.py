import threading
from concurrent.futures import ThreadPoolExecutor

from recruitflow.core.workflow import RequirementWorkflow
from recruitflow.db.repositories import Repository
from recruitflow.db.session import SessionLocal


def _hold_after_read(monkeypatch, parties: int) -> None:
    """Make every caller read the requirement before any of them writes."""
    barrier = threading.Barrier(parties, timeout=10)
    original = Repository.get_requirement

    def get_requirement(self, requirement_id, *, for_update=False):
        row = original(self, requirement_id, for_update=for_update)
        barrier.wait()
        return row

    monkeypatch.setattr(Repository, "get_requirement", get_requirement)


def _toggle(requirement_id: int, caller_id: int) -> str:
    with SessionLocal() as session:
        caller = Repository(session).get_user(caller_id)
        return RequirementWorkflow(session).toggle_status(caller, requirement_id).status


def _assign(requirement_id: int, caller_id: int, employee_id: int) -> int:
    with SessionLocal() as session:
        caller = Repository(session).get_user(caller_id)
        return RequirementWorkflow(session).assign(caller, requirement_id, employee_id).assignee_id


def test_concurrent_toggles_each_flip_the_stored_status(db, admin, lead, make_requirement, monkeypatch) -> None:
    requirement_id = make_requirement(lead).id
    admin_id = admin.id
    _hold_after_read(monkeypatch, 2)

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: _toggle(requirement_id, admin_id), range(2)))
    monkeypatch.undo()

    assert sorted(results) == ["Closed", "Open"]
    with SessionLocal() as session:
        assert Repository(session).get_requirement(requirement_id).status == "Open"


def test_concurrent_assignments_leave_one_active_row(
    db, admin, lead, employee, make_user, make_requirement, monkeypatch
) -> None:
    requirement_id = make_requirement(lead).id
    teammate_id = make_user("employee", lead_id=lead.id).id
    admin_id, lead_id, employee_id = admin.id, lead.id, employee.id
    _hold_after_read(monkeypatch, 2)

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [
            pool.submit(_assign, requirement_id, admin_id, employee_id),
            pool.submit(_assign, requirement_id, lead_id, teammate_id),
        ]
        assigned = {future.result() for future in futures}
    monkeypatch.undo()

    assert assigned == {employee_id, teammate_id}
    with SessionLocal() as session:
        repo = Repository(session)
        history = repo.list_assignments(requirement_id)
        active = [row for row in history if row.is_active]
        assert len(history) == 2
        assert len(active) == 1
        assert repo.get_requirement(requirement_id).assignee_id == active[0].employee_id
