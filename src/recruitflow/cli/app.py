from __future__ import annotations

import json
from typing import NoReturn

import typer
import uvicorn
from sqlalchemy import true

from recruitflow.api.app import create_app
from recruitflow.config import get_settings
from recruitflow.core.dashboard import DashboardAggregator
from recruitflow.core.identity import IdentityService
from recruitflow.db.init import init_database
from recruitflow.db.repositories import Repository
from recruitflow.db.session import SessionLocal
from recruitflow.errors import WorkflowError
from recruitflow.logging_config import configure_logging

app = typer.Typer(help="Recruitment requirement tracker CLI")
users_app = typer.Typer(help="Manage users")
requirements_app = typer.Typer(help="Inspect requirements")
dashboard_app = typer.Typer(help="Dashboard statistics")

app.add_typer(users_app, name="users")
app.add_typer(requirements_app, name="requirements")
app.add_typer(dashboard_app, name="dashboard")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _fail(exc: WorkflowError) -> NoReturn:
    typer.echo(json.dumps({"ok": False, **exc.to_dict()}, indent=2), err=True)
    raise typer.Exit(code=1)


@app.command("init")
def init_cmd() -> None:
    """Create the data directory and database tables."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@users_app.command("bootstrap")
def users_bootstrap(
    name: str = typer.Option(..., "--name"),
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create the first superadmin account."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            user = IdentityService(db).bootstrap_superadmin(name=name, email=email, password=password)
        except WorkflowError as exc:
            _fail(exc)
        typer.echo(json.dumps({"id": user.id, "email": user.email, "role": user.role}, indent=2))


@users_app.command("list")
def users_list() -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_users()
        typer.echo(
            json.dumps(
                [
                    {"id": row.id, "name": row.name, "email": row.email, "role": row.role, "lead_id": row.lead_id}
                    for row in rows
                ],
                indent=2,
            )
        )


@requirements_app.command("list")
def requirements_list(status: str | None = typer.Option(None, "--status")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).list_requirements(true())
        typer.echo(
            json.dumps(
                [
                    {
                        "id": row.id,
                        "ecms_id": row.ecms_id,
                        "client_domain": row.client_domain,
                        "assigned_skill": row.assigned_skill,
                        "status": row.status,
                        "openings": row.openings,
                        "profiles_submitted": row.profiles_submitted,
                        "recruiter_name": row.recruiter_name,
                    }
                    for row in rows
                    if status is None or row.status == status
                ],
                indent=2,
            )
        )


@dashboard_app.command("summary")
def dashboard_summary(user_id: int = typer.Option(..., "--user-id")) -> None:
    """Print the dashboard summary as the given user would see it."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            user = IdentityService(db).get(user_id)
            summary = DashboardAggregator(db).summarize(user)
        except WorkflowError as exc:
            _fail(exc)
        typer.echo(summary.model_dump_json(indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
