"""
Domain Exceptions

Raised at the point a rule is violated and translated to an HTTP response
exactly once by the handlers in ``teamhub.api.errors``.
"""

from typing import Optional


class TeamHubError(Exception):
    """Base class for all expected, client-facing errors."""

    status_code: int = 500
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(TeamHubError):
    status_code = 401
    default_detail = "Authentication required"


class PermissionDenied(TeamHubError):
    """Authenticated, but the caller's team role does not allow the action."""

    status_code = 403
    default_detail = "You do not have permission to perform this action"


class Forbidden(TeamHubError):
    """The action is not allowed for anyone in the current state."""

    status_code = 403
    default_detail = "Forbidden"


class NotFound(TeamHubError):
    status_code = 404
    default_detail = "Resource not found"


class BadRequest(TeamHubError):
    status_code = 400
    default_detail = "Bad request"


class Conflict(TeamHubError):
    status_code = 409
    default_detail = "Resource already exists"
