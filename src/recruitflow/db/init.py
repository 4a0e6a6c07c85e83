from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url

from recruitflow.config import get_settings
from recruitflow.db.base import Base
from recruitflow.db.session import engine
from recruitflow.db import models  # noqa: F401


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [settings.data_dir]
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        paths.append(Path(url.database).parent)
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, list[str]]:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
    return {"tables": sorted(Base.metadata.tables)}
