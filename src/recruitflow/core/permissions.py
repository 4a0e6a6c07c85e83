from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from recruitflow.errors import Forbidden
from recruitflow.types import Role, Scope

Action = Literal[
    "create_requirement",
    "read_requirements",
    "change_status",
    "edit_lead_remarks",
    "assign_employee",
    "submit_profile",
    "add_remark",
    "add_issue",
    "read_remarks",
    "read_submissions",
    "read_assignments",
    "register_user",
    "delete_user",
    "list_users",
]

# Action -> role -> scope of requirements the role may act on. A role missing
# from an action's entry is not allowed to perform it at all.
ACCESS_MATRIX: dict[Action, dict[Role, Scope]] = {
    "create_requirement": {"superadmin": "all", "lead": "all"},
    "read_requirements": {"superadmin": "all", "lead": "team", "employee": "assigned_or_open"},
    "change_status": {"superadmin": "all", "lead": "team"},
    "edit_lead_remarks": {"superadmin": "all", "lead": "team"},
    "assign_employee": {"superadmin": "all", "lead": "all"},
    "submit_profile": {"employee": "all"},
    "add_remark": {"superadmin": "all", "lead": "all", "employee": "all"},
    "add_issue": {"superadmin": "all", "lead": "all", "employee": "all"},
    "read_remarks": {"superadmin": "all", "lead": "all", "employee": "all"},
    "read_submissions": {"superadmin": "all", "lead": "team", "employee": "assigned_or_open"},
    "read_assignments": {"superadmin": "all", "lead": "team"},
    "register_user": {"superadmin": "all"},
    "delete_user": {"superadmin": "all"},
    "list_users": {"superadmin": "all"},
}

_DESCRIPTIONS: dict[Action, str] = {
    "create_requirement": "create requirements",
    "read_requirements": "view requirements",
    "change_status": "change requirement status",
    "edit_lead_remarks": "edit team lead remarks",
    "assign_employee": "assign employees",
    "submit_profile": "submit profiles",
    "add_remark": "add remarks",
    "add_issue": "raise issues",
    "read_remarks": "view remarks",
    "read_submissions": "view submissions",
    "read_assignments": "view assignment history",
    "register_user": "register users",
    "delete_user": "delete users",
    "list_users": "list users",
}


@dataclass(slots=True)
class AccessPolicy:
    role: str

    def scope_for(self, action: Action) -> Scope | None:
        return ACCESS_MATRIX[action].get(self.role)  # type: ignore[arg-type]

    def allows(self, action: Action) -> bool:
        return self.scope_for(action) is not None

    def require(self, action: Action) -> Scope:
        scope = self.scope_for(action)
        if scope is None:
            raise Forbidden(f"Forbidden: role '{self.role}' cannot {_DESCRIPTIONS[action]}")
        return scope
