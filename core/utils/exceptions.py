"""Custom exceptions for the application.

Every error the API surfaces carries a stable ``kind`` and the HTTP status
it maps to; see ``config.api`` for the handlers.
"""


class VastuError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "Error"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None, details=None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(VastuError):
    """Raised when input is malformed or out of range."""

    kind = "ValidationError"
    status_code = 400
    default_message = "Validation failed"


class UnauthorizedError(VastuError):
    """Raised when no valid credential is presented."""

    kind = "UnauthorizedError"
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(VastuError):
    """Raised when the caller is authenticated but not entitled."""

    kind = "ForbiddenError"
    status_code = 403
    default_message = "Access denied"


class NotFoundError(VastuError):
    """Raised when a requested resource is not found."""

    kind = "NotFoundError"
    status_code = 404
    default_message = "Resource not found"


class ConflictError(VastuError):
    """Raised when an illegal state transition is attempted."""

    kind = "ConflictError"
    status_code = 409
    default_message = "Conflicting state"


class DependencyError(VastuError):
    """Raised when an external collaborator (storage, email, ML) fails."""

    kind = "DependencyError"
    status_code = 502
    default_message = "External service failure"
