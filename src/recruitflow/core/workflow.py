from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from recruitflow.config import Settings, get_settings
from recruitflow.core.permissions import AccessPolicy, Action
from recruitflow.db.models import Assignment, Remark, Requirement, Submission, User
from recruitflow.db.repositories import Repository
from recruitflow.db.transaction import atomic, refreshed, store_guard
from recruitflow.errors import Forbidden, InvalidState, NotFound, ValidationError
from recruitflow.types import CLOSED, OPEN, REQUIRED_TEXT_FIELDS, RemarkType, RequirementFields

logger = logging.getLogger(__name__)

_NEXT_STATUS = {OPEN: CLOSED, CLOSED: OPEN}
_EDITABLE_FIELDS = frozenset({"status", "team_lead_remarks"})


class RequirementWorkflow:
    """Single entry point for reading and changing requirements.

    Every mutation runs its checks in a fixed order (role, existence, scope,
    payload, lifecycle) inside one transaction, so a refused call leaves every
    table exactly as it was.
    """

    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def create_requirement(self, caller: User, fields: RequirementFields) -> Requirement:
        AccessPolicy(caller.role).require("create_requirement")

        invalid = [name for name in REQUIRED_TEXT_FIELDS if not getattr(fields, name).strip()]
        if fields.openings < 1:
            invalid.append("openings")
        if invalid:
            raise ValidationError(f"Invalid or missing fields: {', '.join(invalid)}", invalid)

        values = {name: getattr(fields, name).strip() for name in REQUIRED_TEXT_FIELDS}
        with atomic(self.session):
            requirement = self.repo.add_requirement(
                created_by=caller.id,
                openings=fields.openings,
                recruiter_name=_clean_optional(fields.recruiter_name),
                team_lead_remarks=_clean_optional(fields.team_lead_remarks),
                **values,
            )
            caller_id, requirement_id = caller.id, requirement.id
        logger.info("Requirement created requirement_id=%s by user_id=%s", requirement_id, caller_id)
        return refreshed(self.session, requirement)

    def list_requirements(self, caller: User) -> list[Requirement]:
        scope = AccessPolicy(caller.role).require("read_requirements")
        with store_guard():
            return self.repo.list_requirements(self.repo.scope_clause(scope, caller))

    def get_requirement(self, caller: User, requirement_id: int) -> Requirement:
        with store_guard():
            return self._load(caller, requirement_id, "read_requirements")

    def toggle_status(self, caller: User, requirement_id: int) -> Requirement:
        with atomic(self.session):
            requirement = self._load(caller, requirement_id, "change_status", for_update=True)
            # evaluated by the store, so concurrent toggles each flip the latest status
            self.repo.toggle_requirement_status(requirement_id)
            self.session.refresh(requirement)
            caller_id, current = caller.id, requirement.status
        logger.info(
            "Requirement status toggled requirement_id=%s %s->%s by user_id=%s",
            requirement_id,
            _NEXT_STATUS[current],
            current,
            caller_id,
        )
        return refreshed(self.session, requirement)

    def update_requirement(self, caller: User, requirement_id: int, changes: dict[str, Any]) -> Requirement:
        """Apply a partial update of ``status`` and/or ``team_lead_remarks`` in one transaction.

        ``profiles_submitted`` and every other column are refused; the counter
        only moves through ``submit_profile``.
        """
        unknown = sorted(set(changes) - _EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}", unknown)
        if not changes:
            raise ValidationError("No changes supplied", sorted(_EDITABLE_FIELDS))

        with atomic(self.session):
            if "status" in changes:
                requirement = self._load(caller, requirement_id, "change_status", for_update=True)
            if "team_lead_remarks" in changes:
                requirement = self._load(caller, requirement_id, "edit_lead_remarks", for_update=True)

            values: dict[str, Any] = {}
            if "status" in changes:
                if changes["status"] not in _NEXT_STATUS:
                    raise ValidationError(f"Unknown status '{changes['status']}'", ["status"])
                values["status"] = changes["status"]
            if "team_lead_remarks" in changes:
                values["team_lead_remarks"] = _clean_optional(changes["team_lead_remarks"])
            self.repo.update_requirement_columns(requirement_id, **values)
            caller_id = caller.id

        logger.info(
            "Requirement updated requirement_id=%s fields=%s by user_id=%s",
            requirement_id,
            ",".join(sorted(changes)),
            caller_id,
        )
        return refreshed(self.session, requirement)

    def set_status(self, caller: User, requirement_id: int, status: str) -> Requirement:
        return self.update_requirement(caller, requirement_id, {"status": status})

    def update_team_lead_remarks(self, caller: User, requirement_id: int, text: str | None) -> Requirement:
        return self.update_requirement(caller, requirement_id, {"team_lead_remarks": text})

    def submit_profile(self, caller: User, requirement_id: int, count: int = 1) -> Submission:
        with atomic(self.session):
            requirement = self._load(caller, requirement_id, "submit_profile")
            if count < 1:
                raise ValidationError("count must be at least 1", ["count"])
            if requirement.status != OPEN:
                raise InvalidState(f"Requirement {requirement_id} is {requirement.status}; submissions are closed")

            # Conditional increment: a concurrent close between the check above
            # and this statement leaves zero rows touched.
            if not self.repo.increment_profiles_submitted(requirement_id, count):
                raise InvalidState(f"Requirement {requirement_id} is Closed; submissions are closed")
            submission = self.repo.add_submission(
                requirement_id=requirement_id,
                submitted_by=caller.id,
                count=count,
            )
            caller_id = caller.id
        logger.info(
            "Profiles submitted requirement_id=%s count=%s by user_id=%s", requirement_id, count, caller_id
        )
        return refreshed(self.session, submission)

    def assign(self, caller: User, requirement_id: int, employee_id: int) -> Requirement:
        with atomic(self.session):
            requirement = self._load(caller, requirement_id, "assign_employee", for_update=True)
            employee = self.repo.get_user(employee_id)
            if employee is None:
                raise NotFound(f"User {employee_id} not found")
            if employee.role != "employee":
                raise ValidationError(f"User {employee_id} is not an employee", ["employee_id"])

            self.repo.replace_assignment(
                requirement_id=requirement_id,
                employee_id=employee.id,
                assigned_by=caller.id,
            )
            self.repo.update_requirement_columns(
                requirement_id,
                assignee_id=employee.id,
                recruiter_name=employee.name,
            )
            caller_id = caller.id
        logger.info(
            "Requirement assigned requirement_id=%s employee_id=%s by user_id=%s",
            requirement_id,
            employee_id,
            caller_id,
        )
        return refreshed(self.session, requirement)

    def append_remark(
        self,
        caller: User,
        requirement_id: int,
        text: str,
        remark_type: RemarkType = "remark",
    ) -> Remark:
        """Append one entry to the remark log and return that entry."""
        action: Action = "add_issue" if remark_type == "issue" else "add_remark"
        with atomic(self.session):
            self._load(caller, requirement_id, action)
            if remark_type not in ("remark", "issue"):
                raise ValidationError(f"Unknown remark type '{remark_type}'", ["remark_type"])
            if not text or not text.strip():
                raise ValidationError("Remark text must not be empty", ["text"])
            remark = self.repo.add_remark(
                requirement_id=requirement_id,
                author_id=caller.id,
                text=text.strip(),
                remark_type=remark_type,
            )
            caller_id, remark_id = caller.id, remark.id
        logger.info(
            "Remark appended remark_id=%s requirement_id=%s type=%s by user_id=%s",
            remark_id,
            requirement_id,
            remark_type,
            caller_id,
        )
        return refreshed(self.session, remark)

    def add_remark(
        self,
        caller: User,
        requirement_id: int,
        text: str,
        remark_type: RemarkType = "remark",
    ) -> list[Remark]:
        self.append_remark(caller, requirement_id, text, remark_type)
        with store_guard():
            return self.repo.list_remarks(requirement_id)

    def add_issue(self, caller: User, requirement_id: int, text: str) -> list[Remark]:
        return self.add_remark(caller, requirement_id, text, "issue")

    def list_remarks(self, caller: User, requirement_id: int) -> list[Remark]:
        with store_guard():
            self._load(caller, requirement_id, "read_remarks")
            return self.repo.list_remarks(requirement_id)

    def list_submissions(self, caller: User, requirement_id: int) -> list[Submission]:
        with store_guard():
            self._load(caller, requirement_id, "read_submissions")
            return self.repo.list_submissions(requirement_id)

    def list_assignments(self, caller: User, requirement_id: int) -> list[Assignment]:
        with store_guard():
            self._load(caller, requirement_id, "read_assignments")
            return self.repo.list_assignments(requirement_id)

    def _load(
        self,
        caller: User,
        requirement_id: int,
        action: Action,
        *,
        for_update: bool = False,
    ) -> Requirement:
        scope = AccessPolicy(caller.role).require(action)
        requirement = self.repo.get_requirement(requirement_id, for_update=for_update)
        if requirement is None:
            raise NotFound(f"Requirement {requirement_id} not found")
        if scope != "all" and not self.repo.requirement_in_scope(
            requirement_id, self.repo.scope_clause(scope, caller)
        ):
            logger.warning(
                "Out of scope action=%s requirement_id=%s user_id=%s", action, requirement_id, caller.id
            )
            raise Forbidden(f"Forbidden: requirement {requirement_id} is outside your scope")
        return requirement


def _clean_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
