from __future__ import annotations

from sqlalchemy.orm import Session

from recruitflow.core.permissions import AccessPolicy
from recruitflow.db.models import User
from recruitflow.db.repositories import Repository
from recruitflow.db.transaction import store_guard
from recruitflow.types import Summary, TeamPerformance


class DashboardAggregator:
    """Read-only counts over the requirements a caller can see. Nothing is cached."""

    def __init__(self, session: Session):
        self.session = session
        self.repo = Repository(session)

    def summarize(self, caller: User) -> Summary:
        scope = AccessPolicy(caller.role).require("read_requirements")
        clause = self.repo.scope_clause(scope, caller)
        # one statement, so every figure comes from the same committed state;
        # issues counts Remark rows, not requirements carrying an issue
        with store_guard():
            counts = self.repo.summary_counts(clause)

        return Summary(
            total_requirements=counts["open"] + counts["closed"],
            completed=counts["closed"],
            pending=counts["open"],
            issues=counts["issues"],
            team_performance=TeamPerformance(total_submissions=counts["submissions"]),
        )
