from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from recruitflow.config import Settings, get_settings
from recruitflow.errors import AuthError


@lru_cache(maxsize=4)
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return _password_context(settings.bcrypt_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str, settings: Settings | None = None) -> bool:
    settings = settings or get_settings()
    if not hashed_password:
        return False
    try:
        return _password_context(settings.bcrypt_rounds).verify(plain_password, hashed_password)
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(user_id: int, role: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.access_token_expire_minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings | None = None) -> int:
    """Return the user id a token was issued for, or raise ``AuthError``."""
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthError("Could not validate credentials") from exc

    if payload.get("type") != "access":
        raise AuthError("Access token required")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthError("Could not validate credentials") from exc
