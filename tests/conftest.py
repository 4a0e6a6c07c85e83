from __future__ import annotations

import os
import tempfile
from collections.abc import Callable
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="recruitflow-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR / 'recruitflow.db'}"
os.environ["DATA_DIR"] = str(_TEST_DIR)
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"

import pytest  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from recruitflow.core.security import hash_password  # noqa: E402
from recruitflow.core.workflow import RequirementWorkflow  # noqa: E402
from recruitflow.db.base import Base  # noqa: E402
from recruitflow.db.models import Requirement, User  # noqa: E402
from recruitflow.db.repositories import Repository  # noqa: E402
from recruitflow.db.session import SessionLocal, engine  # noqa: E402
from recruitflow.types import RequirementFields  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db() -> Session:
    with SessionLocal() as session:
        yield session


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(
        role: str,
        *,
        name: str | None = None,
        email: str | None = None,
        lead_id: int | None = None,
        password: str = "secret123",
    ) -> User:
        repo = Repository(db)
        index = len(repo.list_users()) + 1
        user = repo.add_user(
            name=name or f"{role.title()} {index}",
            email=email or f"{role}{index}@demo.com",
            role=role,
            password_hash=hash_password(password),
            lead_id=lead_id,
        )
        db.commit()
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user("superadmin", name="Super Admin", email="admin@demo.com", password="admin123")


@pytest.fixture
def lead(make_user) -> User:
    return make_user("lead", name="Taylor Lead", email="lead@demo.com", password="lead123")


@pytest.fixture
def employee(make_user, lead) -> User:
    return make_user("employee", name="Riley Recruiter", email="emp1@demo.com", lead_id=lead.id, password="emp123")


def _requirement_fields(**overrides) -> RequirementFields:
    values = {
        "client_domain": "FinTech",
        "assigned_skill": "React",
        "ecms_id": "ECMS-1001",
        "required_experience": "3-5 years",
        "required_location": "Remote",
        "assigned_budget": "$80/hr",
        "openings": 2,
    }
    values.update(overrides)
    return RequirementFields(**values)


@pytest.fixture
def requirement_fields() -> Callable[..., RequirementFields]:
    return _requirement_fields


@pytest.fixture
def make_requirement(db: Session) -> Callable[..., Requirement]:
    def _make(creator: User, **overrides) -> Requirement:
        return RequirementWorkflow(db).create_requirement(creator, _requirement_fields(**overrides))

    return _make
