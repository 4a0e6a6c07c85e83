from __future__ import annotations

from sqlalchemy import ColumnElement, and_, case, func, or_, select, true, update
from sqlalchemy.orm import Session

from recruitflow.db.base import utcnow
from recruitflow.db.models import Assignment, Remark, Requirement, Submission, User
from recruitflow.types import CLOSED, OPEN, Scope


class Repository:
    """Query and write helpers over one session.

    Writes are only flushed here; the calling service owns the transaction and
    decides when to commit or roll back.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_user(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(User.email == email))

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.id.asc())).all())

    def count_users_with_role(self, role: str) -> int:
        return self.session.scalar(select(func.count(User.id)).where(User.role == role)) or 0

    def add_user(
        self,
        *,
        name: str,
        email: str,
        role: str,
        password_hash: str,
        lead_id: int | None = None,
    ) -> User:
        user = User(name=name, email=email, role=role, password_hash=password_hash, lead_id=lead_id)
        self.session.add(user)
        self.session.flush()
        return user

    def delete_user(self, user: User) -> int:
        """Delete ``user`` and detach anyone reporting to them. Returns the number detached."""
        detached = self.session.execute(
            update(User)
            .where(User.lead_id == user.id)
            .values(lead_id=None, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        ).rowcount
        self.session.delete(user)
        self.session.flush()
        return detached or 0

    def scope_clause(self, scope: Scope, user: User) -> ColumnElement[bool]:
        if scope == "all":
            return true()
        if scope == "team":
            team = select(User.id).where(User.lead_id == user.id)
            return or_(Requirement.created_by == user.id, Requirement.created_by.in_(team))
        if scope == "assigned_or_open":
            return or_(Requirement.assignee_id == user.id, Requirement.status == OPEN)
        raise ValueError(f"unsupported scope '{scope}'")

    def add_requirement(self, *, created_by: int, **values) -> Requirement:
        requirement = Requirement(created_by=created_by, status=OPEN, profiles_submitted=0, **values)
        self.session.add(requirement)
        self.session.flush()
        return requirement

    def get_requirement(self, requirement_id: int, *, for_update: bool = False) -> Requirement | None:
        statement = select(Requirement).where(Requirement.id == requirement_id)
        if for_update:
            statement = statement.with_for_update()
        return self.session.scalar(statement)

    def list_requirements(self, clause: ColumnElement[bool]) -> list[Requirement]:
        statement = select(Requirement).where(clause).order_by(Requirement.id.desc())
        return list(self.session.scalars(statement).all())

    def requirement_in_scope(self, requirement_id: int, clause: ColumnElement[bool]) -> bool:
        statement = select(func.count(Requirement.id)).where(and_(Requirement.id == requirement_id, clause))
        return bool(self.session.scalar(statement))

    def increment_profiles_submitted(self, requirement_id: int, count: int) -> int:
        """Atomically add ``count`` to an Open requirement's counter. Returns rows touched."""
        result = self.session.execute(
            update(Requirement)
            .where(Requirement.id == requirement_id, Requirement.status == OPEN)
            .values(
                profiles_submitted=Requirement.profiles_submitted + count,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def toggle_requirement_status(self, requirement_id: int) -> int:
        """Flip Open and Closed in one statement, evaluated against the stored status."""
        result = self.session.execute(
            update(Requirement)
            .where(Requirement.id == requirement_id)
            .values(
                status=case((Requirement.status == OPEN, CLOSED), else_=OPEN),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def update_requirement_columns(self, requirement_id: int, **values) -> int:
        result = self.session.execute(
            update(Requirement)
            .where(Requirement.id == requirement_id)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def add_remark(self, *, requirement_id: int, author_id: int, text: str, remark_type: str) -> Remark:
        remark = Remark(
            requirement_id=requirement_id,
            author_id=author_id,
            text=text,
            remark_type=remark_type,
        )
        self.session.add(remark)
        self.session.flush()
        return remark

    def list_remarks(self, requirement_id: int) -> list[Remark]:
        statement = (
            select(Remark)
            .where(Remark.requirement_id == requirement_id)
            .order_by(Remark.created_at.asc(), Remark.id.asc())
        )
        return list(self.session.scalars(statement).all())

    def add_submission(self, *, requirement_id: int, submitted_by: int, count: int) -> Submission:
        submission = Submission(requirement_id=requirement_id, submitted_by=submitted_by, count=count)
        self.session.add(submission)
        self.session.flush()
        return submission

    def list_submissions(self, requirement_id: int) -> list[Submission]:
        statement = (
            select(Submission)
            .where(Submission.requirement_id == requirement_id)
            .order_by(Submission.created_at.asc(), Submission.id.asc())
        )
        return list(self.session.scalars(statement).all())

    def sum_submissions(self, requirement_id: int) -> int:
        statement = select(func.coalesce(func.sum(Submission.count), 0)).where(
            Submission.requirement_id == requirement_id
        )
        return int(self.session.scalar(statement) or 0)

    def replace_assignment(self, *, requirement_id: int, employee_id: int, assigned_by: int) -> Assignment:
        self.session.execute(
            update(Assignment)
            .where(Assignment.requirement_id == requirement_id, Assignment.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        assignment = Assignment(
            requirement_id=requirement_id,
            employee_id=employee_id,
            assigned_by=assigned_by,
            is_active=True,
        )
        self.session.add(assignment)
        self.session.flush()
        return assignment

    def list_assignments(self, requirement_id: int) -> list[Assignment]:
        statement = (
            select(Assignment)
            .where(Assignment.requirement_id == requirement_id)
            .order_by(Assignment.assigned_at.asc(), Assignment.id.asc())
        )
        return list(self.session.scalars(statement).all())

    def summary_counts(self, clause: ColumnElement[bool]) -> dict[str, int]:
        """Dashboard counts over the rows matching ``clause``, read in a single statement."""
        open_count = select(func.count(Requirement.id)).where(clause, Requirement.status == OPEN).correlate(None)
        closed_count = select(func.count(Requirement.id)).where(clause, Requirement.status == CLOSED).correlate(None)
        issues = (
            select(func.count(Remark.id))
            .join(Requirement, Remark.requirement_id == Requirement.id)
            .where(clause, Remark.remark_type == "issue")
            .correlate(None)
        )
        submissions = (
            select(func.coalesce(func.sum(Submission.count), 0))
            .join(Requirement, Submission.requirement_id == Requirement.id)
            .where(clause)
            .correlate(None)
        )
        row = self.session.execute(
            select(
                open_count.scalar_subquery().label("open"),
                closed_count.scalar_subquery().label("closed"),
                issues.scalar_subquery().label("issues"),
                submissions.scalar_subquery().label("submissions"),
            )
        ).one()
        return {key: int(value or 0) for key, value in row._mapping.items()}
