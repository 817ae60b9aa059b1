"""
Error taxonomy of the authentication core.

Each error carries the HTTP status and the message that may be shown to the
client.  Anything that reaches the client as an ``InternalError`` has
already been logged server-side with its real cause.
"""

from __future__ import annotations

from typing import List, Optional

from utils.schemas import FieldError

GENERIC_AUTH_ERROR = "Invalid username/email or password"


class AuthError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def errors(self) -> Optional[List[FieldError]]:
        return None


class ValidationError(AuthError):
    """User-correctable, per-field input problems."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None) -> None:
        super().__init__(message)
        self._errors = list(errors)

    @property
    def errors(self) -> List[FieldError]:
        return self._errors


class DuplicateIdentifierError(AuthError):
    """Username or email is already registered."""

    status_code = 400
    message = "Registration failed"

    _FIELD_MESSAGES = {
        "username": "Username already exists",
        "email": "An account with this email already exists",
    }

    def __init__(self, field: str) -> None:
        super().__init__()
        self.field = field

    @property
    def errors(self) -> List[FieldError]:
        return [FieldError(field=self.field, message=self._FIELD_MESSAGES[self.field])]


class AuthenticationFailure(AuthError):
    """Bad credentials.  Deliberately never says which part was wrong."""

    status_code = 401
    message = GENERIC_AUTH_ERROR


class TokenError(AuthError):
    status_code = 401
    message = "Access token required"


class MissingToken(TokenError):
    pass


class InvalidOrExpiredToken(TokenError):
    status_code = 403
    message = "Invalid or expired token"


class InternalError(AuthError):
    status_code = 500
    message = "Internal server error"
