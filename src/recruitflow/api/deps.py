from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from recruitflow.core.identity import IdentityService
from recruitflow.db.models import User
from recruitflow.db.session import get_db_session
from recruitflow.errors import AuthError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if not token:
        raise AuthError("Not authenticated")
    return IdentityService(db).resolve_token(token)
