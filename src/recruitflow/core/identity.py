from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from recruitflow.config import Settings, get_settings
from recruitflow.core.permissions import AccessPolicy
from recruitflow.core.security import create_access_token, decode_access_token, hash_password, verify_password
from recruitflow.db.models import User
from recruitflow.db.repositories import Repository
from recruitflow.db.transaction import atomic, refreshed, store_guard
from recruitflow.errors import AuthError, Conflict, NotFound, ValidationError
from recruitflow.types import ROLES, NewUser

logger = logging.getLogger(__name__)


class IdentityService:
    """Users, roles and credentials. Only a superadmin may add or remove users."""

    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def authenticate(self, email: str, password: str) -> User:
        with store_guard():
            user = self.repo.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash, self.settings):
            logger.warning("Login rejected for email=%s", email)
            raise AuthError("Incorrect email or password")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, user.role, self.settings)

    def resolve_token(self, token: str) -> User:
        user_id = decode_access_token(token, self.settings)
        with store_guard():
            user = self.repo.get_user(user_id)
        if user is None:
            raise AuthError("Could not validate credentials")
        return user

    def get(self, user_id: int) -> User:
        with store_guard():
            user = self.repo.get_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def list_users(self, caller: User) -> list[User]:
        AccessPolicy(caller.role).require("list_users")
        with store_guard():
            return self.repo.list_users()

    def register(self, caller: User, new_user: NewUser) -> User:
        AccessPolicy(caller.role).require("register_user")
        with atomic(self.session):
            self._validate_new_user(new_user)
            user = self._insert(new_user)
            caller_id, user_id, role = caller.id, user.id, user.role
        logger.info("User registered user_id=%s role=%s by user_id=%s", user_id, role, caller_id)
        return refreshed(self.session, user)

    def bootstrap_superadmin(self, name: str, email: str, password: str) -> User:
        """Create the first superadmin. Operator-only; refuses once any superadmin exists."""
        new_user = NewUser(name=name, email=email, password=password, role="superadmin")
        with atomic(self.session):
            if self.repo.count_users_with_role("superadmin"):
                raise Conflict("A superadmin already exists")
            self._validate_new_user(new_user)
            user = self._insert(new_user)
            user_id = user.id
        logger.info("Superadmin bootstrapped user_id=%s", user_id)
        return refreshed(self.session, user)

    def delete(self, caller: User, user_id: int) -> None:
        AccessPolicy(caller.role).require("delete_user")
        with atomic(self.session):
            user = self.repo.get_user(user_id)
            if user is None:
                raise NotFound(f"User {user_id} not found")
            detached = self.repo.delete_user(user)
            caller_id = caller.id
        logger.info(
            "User deleted user_id=%s by user_id=%s detached_reports=%s", user_id, caller_id, detached
        )

    def _validate_new_user(self, new_user: NewUser) -> None:
        invalid: list[str] = []
        if not new_user.name.strip():
            invalid.append("name")
        if not new_user.email.strip():
            invalid.append("email")
        if not new_user.password:
            invalid.append("password")
        if new_user.role not in ROLES:
            invalid.append("role")
        if invalid:
            raise ValidationError(f"Invalid or missing fields: {', '.join(invalid)}", invalid)

        if new_user.lead_id is not None:
            if new_user.role == "superadmin":
                raise ValidationError("A superadmin cannot report to a lead", ["lead_id"])
            lead = self.repo.get_user(new_user.lead_id)
            if lead is None or lead.role != "lead":
                raise ValidationError(f"lead_id {new_user.lead_id} is not a lead", ["lead_id"])

        if self.repo.get_user_by_email(new_user.email) is not None:
            raise Conflict("Email already registered")

    def _insert(self, new_user: NewUser) -> User:
        try:
            return self.repo.add_user(
                name=new_user.name.strip(),
                email=new_user.email.strip(),
                role=new_user.role,
                password_hash=hash_password(new_user.password, self.settings),
                lead_id=new_user.lead_id,
            )
        except IntegrityError as exc:
            raise Conflict("Email already registered") from exc
