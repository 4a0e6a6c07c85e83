from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from recruitflow.errors import Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def atomic(session: Session) -> Iterator[Session]:
    """Run the block as one all-or-nothing unit: commit on success, roll back on any error."""
    try:
        yield session
        session.commit()
    except (OperationalError, PoolTimeoutError) as exc:
        session.rollback()
        logger.warning("Store unavailable during write: %s", exc.__class__.__name__)
        raise Unavailable("Data store is unavailable, retry later") from exc
    except Exception:
        session.rollback()
        raise


@contextmanager
def store_guard() -> Iterator[None]:
    try:
        yield
    except (OperationalError, PoolTimeoutError) as exc:
        logger.warning("Store unavailable during read: %s", exc.__class__.__name__)
        raise Unavailable("Data store is unavailable, retry later") from exc


def refreshed(session: Session, row: T) -> T:
    """Reload a row expired by the last commit, mapping store failures like any read."""
    with store_guard():
        session.refresh(row)
    return row
