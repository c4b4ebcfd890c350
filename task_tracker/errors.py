"""
Error kinds raised by the services.

Each ``AppError`` carries the HTTP status it renders as; the handlers
registered in ``task_tracker.main`` turn them into the response envelope.
Token errors are kept separate because callers translate them differently
(the request gate answers 401, the refresh flow answers 403).
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server Error"

    def __init__(self, message: str | None = None, error: str | None = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class ServerError(AppError):
    pass


# ── Token errors ────────────────────────────────────────

class TokenError(Exception):
    pass


class TokenInvalid(TokenError):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpired(TokenError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class SigningError(ServerError):
    default_message = "Token signing key is not configured"
