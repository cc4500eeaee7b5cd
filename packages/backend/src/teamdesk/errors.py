"""Application error taxonomy.

Learn: Services raise these instead of HTTPException so the business
logic stays HTTP-agnostic (the CLI and tests call services directly).
main.py registers one exception handler that turns any TeamDeskError
into the standard envelope:

    {"error": {"code": "not_found", "message": "Task not found"}}

Messages are user-safe. Internal details (stack traces, SQL errors)
are logged server-side and never echoed to the client.
"""

from typing import Optional


class TeamDeskError(Exception):
    """Base class — every subclass maps to a fixed status and code."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(TeamDeskError):
    status_code = 400
    code = "validation_error"
    message = "Request validation failed."


class DuplicateEmail(TeamDeskError):
    status_code = 400
    code = "duplicate_email"
    message = "This email address is already registered."


class InvalidCredentials(TeamDeskError):
    """Login failure. Same error for unknown email and wrong password."""

    status_code = 401
    code = "invalid_credentials"
    message = "Invalid email or password."


class MissingToken(TeamDeskError):
    status_code = 401
    code = "missing_token"
    message = "Access token required."


class InvalidToken(TeamDeskError):
    status_code = 403
    code = "invalid_token"
    message = "Invalid or expired token."


class NoTeam(TeamDeskError):
    status_code = 403
    code = "no_team"
    message = "You must belong to a team to do that."


class NotFound(TeamDeskError):
    """Record is absent OR belongs to another team — never say which."""

    status_code = 404
    code = "not_found"
    message = "Not found."


class RateLimited(TeamDeskError):
    status_code = 429
    code = "rate_limited"
    message = "Rate limit exceeded. Try again later."


class InternalError(TeamDeskError):
    pass
