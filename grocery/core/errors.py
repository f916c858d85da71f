"""
Application errors.

Every error raised by the access-control engine and the handlers around it is
an AppError. Errors carry the HTTP status, a stable machine-readable code and a
message; translating them into responses is left to the exception handler in
grocery.main.
"""
import enum
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base application error."""
    status_code: int = 500
    code: str = "SERVER_ERROR"
    description: str = "Server error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        meta: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.description
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.meta = meta or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(AppError):
    """Malformed input, e.g. a store definition without a name."""
    status_code = 400
    code = "BAD_REQUEST_ERROR"
    description = "Bad request"


class AuthenticationError(AppError):
    """No resolved identity for the caller."""
    status_code = 401
    code = "AUTHENTICATION_FAILED"
    description = "You must be logged in"


class TokenExpiredError(AuthenticationError):
    status_code = 419
    code = "TOKEN_EXPIRED_ERROR"
    description = "Token expired"


class NotFoundError(AppError):
    """A referenced store, role or user does not resolve."""
    status_code = 404
    code = "NOT_FOUND_ERROR"
    description = "Resource not found"


class ForbiddenKind(str, enum.Enum):
    """Internal reason of a ForbiddenError. Never sent to clients."""
    ROLE_LACKS_PERMISSION = "role-lacks-permission"
    TARGET_OUTSIDE_SUBTREE = "target-outside-subtree"


class ForbiddenError(AppError):
    """
    Authorization denied.

    Both kinds share the same external message so a caller cannot tell which
    check failed; `kind` stays available for logging and tests.
    """
    status_code = 403
    code = "FORBIDDEN_ERROR"
    description = "Access forbidden"

    def __init__(self, kind: ForbiddenKind, **kwargs: Any):
        self.kind = ForbiddenKind(kind)
        super().__init__(**kwargs)
