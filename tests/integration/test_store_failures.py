import pytest
from sqlalchemy.exc import OperationalError

from recruitflow.core.dashboard import DashboardAggregator
from recruitflow.core.workflow import RequirementWorkflow
from recruitflow.db.repositories import Repository
from recruitflow.errors import Unavailable


def _locked(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


def test_failed_commit_leaves_no_partial_submission(db, lead, employee, make_requirement, monkeypatch) -> None:
    requirement = make_requirement(lead)
    requirement_id = requirement.id
    workflow = RequirementWorkflow(db)

    monkeypatch.setattr(db, "commit", _locked)
    with pytest.raises(Unavailable):
        workflow.submit_profile(employee, requirement_id, 3)
    monkeypatch.undo()

    repo = Repository(db)
    assert repo.get_requirement(requirement_id).profiles_submitted == 0
    assert repo.list_submissions(requirement_id) == []


def test_read_failure_surfaces_as_unavailable(db, lead, monkeypatch) -> None:
    monkeypatch.setattr(Repository, "summary_counts", _locked)
    with pytest.raises(Unavailable) as excinfo:
        DashboardAggregator(db).summarize(lead)
    assert excinfo.value.status_code == 503


def test_reload_after_commit_surfaces_as_unavailable(db, lead, requirement_fields, monkeypatch) -> None:
    workflow = RequirementWorkflow(db)
    lead_id = lead.id

    monkeypatch.setattr(db, "refresh", _locked)
    with pytest.raises(Unavailable):
        workflow.create_requirement(lead, requirement_fields(ecms_id="ECMS-2001"))
    monkeypatch.undo()

    stored = Repository(db).list_requirements(Repository(db).scope_clause("all", lead))
    assert [(row.ecms_id, row.created_by) for row in stored] == [("ECMS-2001", lead_id)]
