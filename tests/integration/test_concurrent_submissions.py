from concurrent.futures import ThreadPoolExecutor

from recruitflow.core.workflow import RequirementWorkflow
from recruitflow.db.repositories import Repository
from recruitflow.db.session import SessionLocal


def _submit(requirement_id: int, employee_id: int) -> int:
    with SessionLocal() as session:
        caller = Repository(session).get_user(employee_id)
        return RequirementWorkflow(session).submit_profile(caller, requirement_id, 1).id


def test_parallel_submissions_are_never_lost(db, lead, employee, make_user, make_requirement) -> None:
    requirement = make_requirement(lead, openings=2)
    teammate = make_user("employee", lead_id=lead.id)
    callers = [employee.id, teammate.id] * 8
    requirement_id = requirement.id

    with ThreadPoolExecutor(max_workers=8) as pool:
        submission_ids = list(pool.map(lambda caller_id: _submit(requirement_id, caller_id), callers))

    assert len(set(submission_ids)) == len(callers)
    with SessionLocal() as session:
        repo = Repository(session)
        stored = repo.get_requirement(requirement_id)
        assert stored.profiles_submitted == len(callers)
        assert stored.profiles_submitted == repo.sum_submissions(requirement_id)
