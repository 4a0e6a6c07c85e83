"""Error kinds raised by the identity service and the requirement workflow.

Every error carries a stable ``code`` for programmatic callers and the HTTP
status the API layer answers with. Checks run before any write, so raising one
of these always means nothing was persisted.
"""

from __future__ import annotations


class WorkflowError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(WorkflowError):
    code = "validation_error"
    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = list(fields or [])

    def to_dict(self) -> dict:
        return {**super().to_dict(), "fields": self.fields}


class AuthError(WorkflowError):
    code = "unauthorized"
    status_code = 401


class Forbidden(WorkflowError):
    code = "forbidden"
    status_code = 403


class NotFound(WorkflowError):
    code = "not_found"
    status_code = 404


class InvalidState(WorkflowError):
    code = "invalid_state"
    status_code = 409


class Conflict(WorkflowError):
    code = "conflict"
    status_code = 409


class Unavailable(WorkflowError):
    """The backing store could not be reached or timed out. Safe to retry with backoff."""

    code = "unavailable"
    status_code = 503
