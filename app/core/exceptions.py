"""
Application error taxonomy.

Services and repositories raise these; the handlers registered in
app.main turn them into the JSON error envelope. Backend driver errors are
translated into StoreUnavailable / StoreError at the repository boundary
so raw driver messages never reach a client.
"""

from typing import Any, List, Optional


class AppError(Exception):
    """Base class for every error the API reports on purpose."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Internal server error"
    retryable: bool = False

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_error(self) -> dict:
        error = {"code": self.code}
        if self.details is not None:
            error["details"] = self.details
        if self.retryable:
            error["retryable"] = True
        return error


class ValidationError(AppError):
    """Request data broke one or more field rules. Carries every violation."""

    status_code = 400
    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message, details=self.errors)


class Unauthenticated(AppError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Access token required"


class InvalidCredentials(Unauthenticated):
    code = "invalid_credentials"
    default_message = "Invalid username or password"


class InvalidToken(Unauthenticated):
    code = "invalid_token"
    default_message = "Invalid token"


class TokenExpired(Unauthenticated):
    code = "token_expired"
    default_message = "Token has expired"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class StoreUnavailable(AppError):
    """Backend timed out or could not be reached. Safe to retry."""

    status_code = 500
    code = "store_unavailable"
    default_message = "Storage backend unavailable, please retry"
    retryable = True


class StoreError(AppError):
    """Unexpected backend failure."""

    code = "internal_error"
    default_message = "Internal server error"
